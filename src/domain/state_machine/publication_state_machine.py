from dataclasses import dataclass, replace
from uuid import UUID

from src.domain.enums.listing_status import PublicationState
from src.domain.enums.role import Role
from src.domain.errors import AuthorizationError
from src.domain.principal import Principal


@dataclass(frozen=True)
class PublicationFlags:
    """The three stored fields the publication state is derived from."""

    published: bool = False
    approved: bool = False
    rejection_reason: str | None = None

    @property
    def state(self) -> PublicationState:
        if self.published and self.approved:
            return PublicationState.PUBLISHED
        if not self.approved and self.rejection_reason:
            return PublicationState.REJECTED
        return PublicationState.PENDING

    @property
    def is_public(self) -> bool:
        return self.state is PublicationState.PUBLISHED


PENDING_FLAGS = PublicationFlags(published=False, approved=False)
APPROVED_FLAGS = PublicationFlags(published=True, approved=True)


class PublicationStateMachine:
    """
    Publication/approval rules for a single listing.

    Every method returns the complete set of flags to store, so callers can
    persist a transition as one patch. Ownership and role checks live here
    too since the allowed transition depends on who is asking.
    """

    def initial_flags(self, creator_role: Role) -> PublicationFlags:
        """Admins self-certify; agents always start in review."""
        if creator_role is Role.ADMIN:
            return APPROVED_FLAGS
        if creator_role is Role.AGENT:
            return PENDING_FLAGS
        raise AuthorizationError("Only agents and admins may create listings.")

    def after_update(
        self,
        current: PublicationFlags,
        editor: Principal,
        requested_published: bool | None,
    ) -> PublicationFlags:
        if not editor.is_admin:
            # An agent's edit always goes back to review; approval is kept and
            # a rejected listing is resubmitted
            return replace(current, published=False, rejection_reason=None)
        if requested_published is None:
            return current
        if requested_published:
            return APPROVED_FLAGS
        return replace(current, published=False)

    def approve(self, current: PublicationFlags) -> PublicationFlags:
        return APPROVED_FLAGS

    def reject(self, current: PublicationFlags, reason: str | None) -> PublicationFlags:
        reason = reason.strip() if reason else None
        return PublicationFlags(published=False, approved=False, rejection_reason=reason or None)

    # -------------------------------------------------------------------------
    # Authorization
    # -------------------------------------------------------------------------

    def ensure_can_mutate(self, principal: Principal, owner_id: UUID | None, action: str) -> None:
        if principal.is_admin or principal.owns(owner_id):
            return
        raise AuthorizationError(f"Not authorized to {action} this listing.")

    def ensure_can_review(self, principal: Principal) -> None:
        # Owner-agents can never approve their own listing
        if not principal.is_admin:
            raise AuthorizationError("Only admins may approve or reject listings.")

    def can_view(
        self, principal: Principal | None, owner_id: UUID | None, flags: PublicationFlags
    ) -> bool:
        if flags.is_public:
            return True
        if principal is None:
            return False
        return principal.is_admin or principal.owns(owner_id)
