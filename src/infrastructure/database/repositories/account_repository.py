from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.account_repository import AccountRepository
from src.domain.entities.account import Account
from src.domain.enums.role import Role
from src.infrastructure.database.errors import translate_db_errors
from src.infrastructure.database.models import AccountModel, as_utc


def _to_domain(model: AccountModel) -> Account:
    return Account(
        id=model.id,
        name=model.name,
        email=model.email,
        role=Role(model.role),
        active=model.active,
        phone=model.phone,
        favorites=[UUID(str(f)) for f in model.favorites or []],
        created_at=as_utc(model.created_at),
    )


def _to_model(account: Account) -> AccountModel:
    return AccountModel(
        id=account.id,
        name=account.name,
        email=account.email,
        role=account.role,
        active=account.active,
        phone=account.phone,
        favorites=[str(f) for f in account.favorites],
        created_at=account.created_at,
    )


class SqlAlchemyAccountRepository(AccountRepository):
    """SQLAlchemy implementation for accounts and their favorites."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def add(self, account: Account) -> None:
        self._session.add(_to_model(account))
        await self._session.flush()

    @translate_db_errors
    async def get_by_id(self, account_id: UUID) -> Account | None:
        model = await self._session.get(AccountModel, account_id)
        return _to_domain(model) if model is not None else None

    @translate_db_errors
    async def set_favorites(self, account_id: UUID, favorites: list[UUID]) -> bool:
        model = await self._session.get(AccountModel, account_id)
        if model is None:
            return False
        # Reassign rather than mutate so the JSON column is flagged dirty
        model.favorites = [str(f) for f in favorites]
        await self._session.flush()
        return True

    @translate_db_errors
    async def find_first_admin(self) -> Account | None:
        result = await self._session.execute(
            select(AccountModel)
            .where(AccountModel.role == Role.ADMIN, AccountModel.active.is_(True))
            .order_by(AccountModel.created_at.asc(), AccountModel.id.asc())
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return _to_domain(model) if model is not None else None
