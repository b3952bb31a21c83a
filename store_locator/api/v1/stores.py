"""Store location CRUD endpoints for the embedded admin."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from store_locator.core.deps import CurrentShop, DBSession
from store_locator.core.exceptions import StoreNotFoundError
from store_locator.schemas.store import (
    StoreCreate,
    StoreListResponse,
    StoreResponse,
    StoreUpdate,
)
from store_locator.services.store_service import StoreOrder, StoreService

router = APIRouter()


def _not_found(exc: StoreNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(exc),
    )


@router.get(
    "",
    response_model=StoreListResponse,
    summary="List stores",
    description="List the shop's store locations, newest first.",
)
async def list_stores(shop: CurrentShop, db: DBSession) -> StoreListResponse:
    """List store locations for the admin table."""
    stores = await StoreService(db).list_for_shop(shop, StoreOrder.NEWEST_FIRST)

    return StoreListResponse(
        items=[StoreResponse.model_validate(store) for store in stores],
        total=len(stores),
    )


@router.post(
    "",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create store",
    description="Create a store location. Coordinates that do not parse are stored as null.",
)
async def create_store(data: StoreCreate, shop: CurrentShop, db: DBSession) -> StoreResponse:
    """Create a store location."""
    store = await StoreService(db).create(shop, data)
    return StoreResponse.model_validate(store)


@router.get(
    "/{store_id}",
    response_model=StoreResponse,
    summary="Get store",
)
async def get_store(store_id: UUID, shop: CurrentShop, db: DBSession) -> StoreResponse:
    """Get a store location by ID."""
    try:
        store = await StoreService(db).get(shop, store_id)
    except StoreNotFoundError as e:
        raise _not_found(e)
    return StoreResponse.model_validate(store)


@router.put(
    "/{store_id}",
    response_model=StoreResponse,
    summary="Update store",
    description="Replace all fields of a store location.",
)
async def update_store(
    store_id: UUID,
    data: StoreUpdate,
    shop: CurrentShop,
    db: DBSession,
) -> StoreResponse:
    """Replace a store location's fields."""
    try:
        store = await StoreService(db).update(shop, store_id, data)
    except StoreNotFoundError as e:
        raise _not_found(e)
    return StoreResponse.model_validate(store)


@router.delete(
    "/{store_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete store",
)
async def delete_store(store_id: UUID, shop: CurrentShop, db: DBSession) -> None:
    """Delete a store location."""
    try:
        await StoreService(db).delete(shop, store_id)
    except StoreNotFoundError as e:
        raise _not_found(e)
