from dataclasses import dataclass
from uuid import UUID

import structlog

from src.application.interfaces.account_repository import AccountRepository
from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.account import Account
from src.domain.entities.listing import Listing
from src.domain.errors import AccountNotFoundError, ListingNotFoundError
from src.domain.principal import Principal

logger = structlog.get_logger(__name__)


@dataclass
class FavoriteInput:
    principal: Principal
    listing_id: UUID


@dataclass
class ToggleFavoriteOutput:
    listing_id: UUID
    is_favorite: bool
    favorites: list[UUID]


@dataclass
class FavoritesView:
    listing_ids: list[UUID]
    listings: list[Listing]


async def _load_account(account_repo: AccountRepository, principal: Principal) -> Account:
    account = await account_repo.get_by_id(principal.id)
    if account is None:
        raise AccountNotFoundError(principal.id)
    return account


async def _save_favorites(account_repo: AccountRepository, account: Account) -> None:
    if not await account_repo.set_favorites(account.id, list(account.favorites)):
        raise AccountNotFoundError(account.id)


class AddFavorite:
    """Use case: Save a listing. The listing must exist and not already be saved."""

    def __init__(self, account_repo: AccountRepository, listing_repo: ListingRepository) -> None:
        self._account_repo = account_repo
        self._listing_repo = listing_repo

    async def execute(self, input_data: FavoriteInput) -> list[UUID]:
        account = await _load_account(self._account_repo, input_data.principal)

        if await self._listing_repo.get_by_id(input_data.listing_id) is None:
            raise ListingNotFoundError(input_data.listing_id)

        favorites = account.add_favorite(input_data.listing_id)
        await _save_favorites(self._account_repo, account)

        logger.info(
            "favorite_added", account_id=str(account.id), listing_id=str(input_data.listing_id)
        )
        return favorites


class RemoveFavorite:
    """Use case: Unsave a listing. Works for ids whose listing was deleted."""

    def __init__(self, account_repo: AccountRepository) -> None:
        self._account_repo = account_repo

    async def execute(self, input_data: FavoriteInput) -> list[UUID]:
        account = await _load_account(self._account_repo, input_data.principal)

        favorites = account.remove_favorite(input_data.listing_id)
        await _save_favorites(self._account_repo, account)

        logger.info(
            "favorite_removed", account_id=str(account.id), listing_id=str(input_data.listing_id)
        )
        return favorites


class ToggleFavorite:
    """
    Use case: Flip membership of a listing in the caller's favorites.

    Never fails on the current membership, only on a missing account.
    Concurrent toggles on the same account may lose an update.
    """

    def __init__(self, account_repo: AccountRepository) -> None:
        self._account_repo = account_repo

    async def execute(self, input_data: FavoriteInput) -> ToggleFavoriteOutput:
        account = await _load_account(self._account_repo, input_data.principal)

        is_favorite = account.toggle_favorite(input_data.listing_id)
        await _save_favorites(self._account_repo, account)

        logger.info(
            "favorite_toggled",
            account_id=str(account.id),
            listing_id=str(input_data.listing_id),
            is_favorite=is_favorite,
        )
        return ToggleFavoriteOutput(
            listing_id=input_data.listing_id,
            is_favorite=is_favorite,
            favorites=list(account.favorites),
        )


class ListFavorites:
    """
    Use case: Resolve the caller's favorites.

    Ids of listings that no longer exist, or that the caller may not see
    (unpublished and not theirs), stay in ``listing_ids`` but are left out
    of the resolved listings.
    """

    def __init__(self, account_repo: AccountRepository, listing_repo: ListingRepository) -> None:
        self._account_repo = account_repo
        self._listing_repo = listing_repo

    async def execute(self, principal: Principal) -> FavoritesView:
        account = await _load_account(self._account_repo, principal)
        found = await self._listing_repo.get_many(list(account.favorites))
        listings = [l for l in found if l.is_visible_to(principal)]

        missing = len(account.favorites) - len(found)
        hidden = len(found) - len(listings)
        if missing or hidden:
            logger.debug(
                "favorites_unresolved",
                account_id=str(account.id),
                missing=missing,
                hidden=hidden,
            )

        return FavoritesView(listing_ids=list(account.favorites), listings=listings)
