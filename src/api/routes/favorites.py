from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    get_add_favorite_use_case,
    get_list_favorites_use_case,
    get_remove_favorite_use_case,
    get_toggle_favorite_use_case,
)
from src.api.presenters import listing_to_response
from src.api.schemas.favorite_schemas import (
    FavoriteIdsResponse,
    FavoritesResponse,
    ToggleFavoriteResponse,
)
from src.api.security import get_principal
from src.application.use_cases.manage_favorites import (
    AddFavorite,
    FavoriteInput,
    ListFavorites,
    RemoveFavorite,
    ToggleFavorite,
)
from src.domain.principal import Principal

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=FavoritesResponse)
async def list_favorites(
    principal: Principal = Depends(get_principal),
    use_case: ListFavorites = Depends(get_list_favorites_use_case),
) -> FavoritesResponse:
    view = await use_case.execute(principal)
    return FavoritesResponse(
        favorites=view.listing_ids,
        listings=[listing_to_response(l) for l in view.listings],
    )


@router.post("/{listing_id}", response_model=FavoriteIdsResponse)
async def add_favorite(
    listing_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: AddFavorite = Depends(get_add_favorite_use_case),
) -> FavoriteIdsResponse:
    favorites = await use_case.execute(FavoriteInput(principal=principal, listing_id=listing_id))
    return FavoriteIdsResponse(favorites=favorites)


@router.delete("/{listing_id}", response_model=FavoriteIdsResponse)
async def remove_favorite(
    listing_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: RemoveFavorite = Depends(get_remove_favorite_use_case),
) -> FavoriteIdsResponse:
    favorites = await use_case.execute(FavoriteInput(principal=principal, listing_id=listing_id))
    return FavoriteIdsResponse(favorites=favorites)


@router.put("/{listing_id}/toggle", response_model=ToggleFavoriteResponse)
async def toggle_favorite(
    listing_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: ToggleFavorite = Depends(get_toggle_favorite_use_case),
) -> ToggleFavoriteResponse:
    result = await use_case.execute(FavoriteInput(principal=principal, listing_id=listing_id))
    return ToggleFavoriteResponse(
        listing_id=result.listing_id,
        is_favorite=result.is_favorite,
        favorites=result.favorites,
    )
