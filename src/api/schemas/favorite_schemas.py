from uuid import UUID

from pydantic import BaseModel

from src.api.schemas.listing_schemas import ListingResponse


class FavoriteIdsResponse(BaseModel):
    favorites: list[UUID]


class ToggleFavoriteResponse(BaseModel):
    listing_id: UUID
    is_favorite: bool
    favorites: list[UUID]


class FavoritesResponse(BaseModel):
    # Raw ids, dangling ones included; ``listings`` holds only those that resolved
    favorites: list[UUID]
    listings: list[ListingResponse]
