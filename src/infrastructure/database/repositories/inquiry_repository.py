from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.inquiry_repository import InquiryRepository
from src.domain.entities.inquiry import Inquiry
from src.domain.enums.inquiry_status import InquiryStatus
from src.infrastructure.database.errors import translate_db_errors
from src.infrastructure.database.models import InquiryModel, as_utc


def _to_domain(model: InquiryModel) -> Inquiry:
    return Inquiry(
        id=model.id,
        listing_id=model.listing_id,
        requester_id=model.requester_id,
        original_owner_id=model.original_owner_id,
        message=model.message,
        phone=model.phone,
        status=InquiryStatus(model.status),
        response=model.response,
        responded_at=as_utc(model.responded_at),
        created_at=as_utc(model.created_at),
    )


def _to_model(inquiry: Inquiry) -> InquiryModel:
    return InquiryModel(
        id=inquiry.id,
        listing_id=inquiry.listing_id,
        requester_id=inquiry.requester_id,
        original_owner_id=inquiry.original_owner_id,
        message=inquiry.message,
        phone=inquiry.phone,
        status=inquiry.status,
        response=inquiry.response,
        responded_at=inquiry.responded_at,
        created_at=inquiry.created_at,
    )


class SqlAlchemyInquiryRepository(InquiryRepository):
    """SQLAlchemy implementation for inquiry persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def add(self, inquiry: Inquiry) -> None:
        self._session.add(_to_model(inquiry))
        await self._session.flush()

    @translate_db_errors
    async def get_by_id(self, inquiry_id: UUID) -> Inquiry | None:
        model = await self._session.get(InquiryModel, inquiry_id)
        return _to_domain(model) if model is not None else None

    @translate_db_errors
    async def list_for_listing(self, listing_id: UUID) -> list[Inquiry]:
        result = await self._session.execute(
            select(InquiryModel)
            .where(InquiryModel.listing_id == listing_id)
            .order_by(InquiryModel.created_at.desc(), InquiryModel.id.asc())
        )
        return [_to_domain(m) for m in result.scalars().all()]

    @translate_db_errors
    async def list_for_requester(self, requester_id: UUID) -> list[Inquiry]:
        result = await self._session.execute(
            select(InquiryModel)
            .where(InquiryModel.requester_id == requester_id)
            .order_by(InquiryModel.created_at.desc(), InquiryModel.id.asc())
        )
        return [_to_domain(m) for m in result.scalars().all()]

    @translate_db_errors
    async def update(self, inquiry_id: UUID, patch: Mapping[str, Any]) -> bool:
        model = await self._session.get(InquiryModel, inquiry_id)
        if model is None:
            return False
        for name, value in patch.items():
            setattr(model, name, value)
        await self._session.flush()
        return True

    @translate_db_errors
    async def delete(self, inquiry_id: UUID) -> bool:
        model = await self._session.get(InquiryModel, inquiry_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
