from collections.abc import Mapping
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.application.interfaces.listing_repository import ListingRepository, ListingSummary
from src.domain.entities.listing import Address, Listing, ListingImage
from src.domain.enums.listing_status import PropertyType, TransactionStatus
from src.domain.policies.listing_visibility import ListingQuery
from src.infrastructure.database.errors import translate_db_errors
from src.infrastructure.database.models import ListingModel, as_utc

_SORT_COLUMNS = {
    "created_at": ListingModel.created_at,
    "price": ListingModel.price,
    "views": ListingModel.views,
    "bedrooms": ListingModel.bedrooms,
    "bathrooms": ListingModel.bathrooms,
    "size": ListingModel.size,
    "title": ListingModel.title,
}

_SEARCH_COLUMNS = (
    ListingModel.title,
    ListingModel.description,
    ListingModel.street,
    ListingModel.city,
    ListingModel.state,
    ListingModel.zip_code,
)

_ADDRESS_COLUMNS = ("street", "city", "state", "zip_code", "country")


def _to_domain(model: ListingModel) -> Listing:
    return Listing(
        id=model.id,
        owner_id=model.owner_id,
        title=model.title,
        description=model.description,
        address=Address(
            street=model.street,
            city=model.city,
            state=model.state,
            zip_code=model.zip_code,
            country=model.country,
        ),
        property_type=PropertyType(model.property_type),
        transaction_status=TransactionStatus(model.transaction_status),
        price=Decimal(str(model.price)),
        size=model.size,
        bedrooms=model.bedrooms,
        bathrooms=Decimal(str(model.bathrooms)),
        features=list(model.features or []),
        images=[ListingImage(url=i["url"], public_id=i["public_id"]) for i in model.images or []],
        featured=model.featured,
        published=model.published,
        approved=model.approved,
        rejection_reason=model.rejection_reason,
        views=model.views,
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


def _column_values(name: str, value: Any) -> dict[str, Any]:
    """Translate one entity attribute into the column values that store it."""
    if name == "address":
        return {column: getattr(value, column) for column in _ADDRESS_COLUMNS}
    if name == "images":
        return {"images": [{"url": i.url, "public_id": i.public_id} for i in value]}
    if name == "features":
        return {"features": list(value)}
    return {name: value}


def _to_model(listing: Listing) -> ListingModel:
    values: dict[str, Any] = {}
    for name in (
        "id",
        "owner_id",
        "title",
        "description",
        "address",
        "property_type",
        "transaction_status",
        "price",
        "size",
        "bedrooms",
        "bathrooms",
        "features",
        "images",
        "featured",
        "published",
        "approved",
        "rejection_reason",
        "views",
        "created_at",
        "updated_at",
    ):
        values.update(_column_values(name, getattr(listing, name)))
    return ListingModel(**values)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _conditions(query: ListingQuery) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []

    if query.published is not None:
        conditions.append(ListingModel.published.is_(query.published))
    if query.scope_owner_id is not None:
        conditions.append(ListingModel.owner_id == query.scope_owner_id)

    if query.transaction_status is not None:
        conditions.append(ListingModel.transaction_status == query.transaction_status)
    if query.property_type is not None:
        conditions.append(ListingModel.property_type == query.property_type)
    if query.min_price is not None:
        conditions.append(ListingModel.price >= query.min_price)
    if query.max_price is not None:
        conditions.append(ListingModel.price <= query.max_price)
    if query.bedrooms is not None:
        conditions.append(ListingModel.bedrooms == query.bedrooms)
    if query.city:
        conditions.append(ListingModel.city.ilike(_like_pattern(query.city), escape="\\"))
    if query.owner_id is not None:
        conditions.append(ListingModel.owner_id == query.owner_id)
    if query.featured is not None:
        conditions.append(ListingModel.featured.is_(query.featured))

    if query.search:
        pattern = _like_pattern(query.search)
        conditions.append(or_(*(column.ilike(pattern, escape="\\") for column in _SEARCH_COLUMNS)))

    return conditions


class SqlAlchemyListingRepository(ListingRepository):
    """SQLAlchemy implementation for listing persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def add(self, listing: Listing) -> None:
        self._session.add(_to_model(listing))
        await self._session.flush()

    @translate_db_errors
    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        model = await self._session.get(ListingModel, listing_id)
        return _to_domain(model) if model is not None else None

    @translate_db_errors
    async def get_many(self, listing_ids: list[UUID]) -> list[Listing]:
        if not listing_ids:
            return []
        result = await self._session.execute(
            select(ListingModel).where(ListingModel.id.in_(listing_ids))
        )
        by_id = {model.id: model for model in result.scalars().all()}
        return [_to_domain(by_id[i]) for i in listing_ids if i in by_id]

    @translate_db_errors
    async def find(self, query: ListingQuery) -> tuple[list[Listing], int]:
        conditions = _conditions(query)

        order_by = []
        for key in query.sort:
            column = _SORT_COLUMNS[key.field]
            order_by.append(column.desc() if key.descending else column.asc())
        order_by.append(ListingModel.id.asc())

        stmt = (
            select(ListingModel)
            .where(*conditions)
            .order_by(*order_by)
            .limit(query.limit)
            .offset(query.offset)
        )
        count_stmt = select(func.count()).select_from(ListingModel).where(*conditions)

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        count_result = await self._session.execute(count_stmt)
        total = count_result.scalar_one()

        return [_to_domain(m) for m in models], total

    @translate_db_errors
    async def update(self, listing_id: UUID, patch: Mapping[str, Any]) -> bool:
        model = await self._session.get(ListingModel, listing_id)
        if model is None:
            return False
        for name, value in patch.items():
            for column, column_value in _column_values(name, value).items():
                setattr(model, column, column_value)
        await self._session.flush()
        return True

    @translate_db_errors
    async def delete(self, listing_id: UUID) -> bool:
        model = await self._session.get(ListingModel, listing_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    @translate_db_errors
    async def summarize(self, *, owner_id: UUID | None = None) -> ListingSummary:
        scope = [ListingModel.owner_id == owner_id] if owner_id is not None else []

        published = and_(ListingModel.published.is_(True), ListingModel.approved.is_(True))
        rejected = and_(
            ListingModel.approved.is_(False),
            ListingModel.rejection_reason.is_not(None),
            ListingModel.rejection_reason != "",
        )
        totals = await self._session.execute(
            select(
                func.count(),
                func.coalesce(func.sum(case((published, 1), else_=0)), 0),
                func.coalesce(func.sum(case((rejected, 1), else_=0)), 0),
            )
            .select_from(ListingModel)
            .where(*scope)
        )
        total, published_count, rejected_count = totals.one()

        by_status = await self._session.execute(
            select(ListingModel.transaction_status, func.count())
            .where(*scope)
            .group_by(ListingModel.transaction_status)
        )
        counts = {TransactionStatus(status).value: count for status, count in by_status.all()}

        return ListingSummary(
            total=total,
            published=int(published_count),
            pending=total - int(published_count) - int(rejected_count),
            rejected=int(rejected_count),
            by_transaction_status={s.value: counts.get(s.value, 0) for s in TransactionStatus},
        )
