"""Error taxonomy shared by every layer.

Use cases raise these; the API layer maps each base class to one HTTP status.
"""


class ListingServiceError(Exception):
    """Base exception for the listing service."""

    code: str = "listing_service_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = str(self.args[0])


class ValidationError(ListingServiceError):
    """Malformed or missing required input."""

    code = "validation_error"


class AuthenticationError(ListingServiceError):
    """Authentication required."""

    code = "authentication_error"


class AuthorizationError(ListingServiceError):
    """Not authorized to perform this action."""

    code = "authorization_error"


class NotFoundError(ListingServiceError):
    """Referenced entity not found."""

    code = "not_found"


class ConflictError(ListingServiceError):
    """Request conflicts with the current state of the resource."""

    code = "conflict"


class DependencyUnavailableError(ListingServiceError):
    """A required collaborator is unavailable."""

    code = "dependency_unavailable"


class InternalError(ListingServiceError):
    """Unexpected internal failure."""

    code = "internal_error"


class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: object) -> None:
        super().__init__(f"Listing {listing_id} not found.")


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id: object) -> None:
        super().__init__(f"Account {account_id} not found.")


class InquiryNotFoundError(NotFoundError):
    def __init__(self, inquiry_id: object) -> None:
        super().__init__(f"Inquiry {inquiry_id} not found.")
