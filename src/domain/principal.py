from dataclasses import dataclass
from uuid import UUID

from src.domain.enums.role import Role
from src.domain.errors import AuthorizationError


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller of a single request.

    Supplied by the auth boundary and never persisted by the core.
    Anonymous callers are represented by ``None`` rather than a sentinel.
    """

    id: UUID
    role: Role
    active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role is Role.AGENT

    def owns(self, owner_id: UUID | None) -> bool:
        return owner_id is not None and owner_id == self.id


def require_admin(principal: Principal, action: str) -> None:
    """Raise AuthorizationError unless the caller is an admin."""
    if not principal.is_admin:
        raise AuthorizationError(f"Only admins may {action}.")
