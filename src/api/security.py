"""
Principal resolution.

An upstream gateway authenticates the caller and forwards the account id in
a header (``settings.principal_header``). The id is looked up here; only
active accounts become principals.
"""
from uuid import UUID

import structlog
from fastapi import Depends, Request

from src.api.dependencies import get_account_repo
from src.application.interfaces.account_repository import AccountRepository
from src.config import settings
from src.domain.errors import AuthenticationError
from src.domain.principal import Principal

logger = structlog.get_logger(__name__)


async def resolve_principal(raw_id: str, account_repo: AccountRepository) -> Principal:
    try:
        account_id = UUID(raw_id.strip())
    except ValueError:
        raise AuthenticationError("Not authorized, invalid account id.") from None

    account = await account_repo.get_by_id(account_id)
    if account is None:
        logger.info("principal_unknown", account_id=str(account_id))
        raise AuthenticationError("Not authorized, account not found.")
    if not account.active:
        logger.info("principal_inactive", account_id=str(account_id))
        raise AuthenticationError("Not authorized, account is deactivated.")

    return account.to_principal()


async def get_optional_principal(
    request: Request,
    account_repo: AccountRepository = Depends(get_account_repo),
) -> Principal | None:
    """The caller, or None for anonymous requests. A bad header still fails."""
    raw_id = request.headers.get(settings.principal_header)
    if raw_id is None or not raw_id.strip():
        return None
    return await resolve_principal(raw_id, account_repo)


async def get_principal(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise AuthenticationError("Not authorized, no account id provided.")
    return principal
