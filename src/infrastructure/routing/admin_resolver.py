import structlog

from src.application.interfaces.account_repository import AccountRepository
from src.application.interfaces.responsible_party_resolver import ResponsiblePartyResolver
from src.domain.entities.account import Account

logger = structlog.get_logger(__name__)


class FirstAdminResolver(ResponsiblePartyResolver):
    """Routes every inquiry to the earliest-created active admin."""

    def __init__(self, account_repo: AccountRepository) -> None:
        self._account_repo = account_repo

    async def resolve(self) -> Account | None:
        admin = await self._account_repo.find_first_admin()
        if admin is None:
            logger.warning("no_admin_available")
        return admin
