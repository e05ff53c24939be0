from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.storage.base import Storage
from shared.storage.dependencies import get_storage
from .owner import OwnerKey
from .schemas import CartClearedResponse, CartItemCreate, CartItemResponse, CartItemUpdate, CartLineResponse
from .service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])

def get_cart_service(storage: Storage = Depends(get_storage)) -> CartService:
    return CartService(storage)

def get_owner(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
) -> OwnerKey:
    return OwnerKey.resolve(user_id, session_id)


@router.get("", response_model=list[CartLineResponse])
async def list_cart(
    owner: OwnerKey = Depends(get_owner),
    service: CartService = Depends(get_cart_service),
):
    return await service.list_cart(owner)


@router.post("", response_model=CartItemResponse)
async def add_to_cart(item: CartItemCreate, service: CartService = Depends(get_cart_service)):
    owner = OwnerKey.resolve(item.user_id, item.session_id)
    return await service.add_to_cart(owner, item.product_id, item.quantity)


@router.put("/{item_id}", response_model=Optional[CartItemResponse])
async def update_cart_item(
    item_id: int,
    update: CartItemUpdate,
    service: CartService = Depends(get_cart_service),
):
    # null body means the item was removed
    return await service.update_quantity(item_id, update.quantity)


@router.delete("/{item_id}")
async def remove_cart_item(item_id: int, service: CartService = Depends(get_cart_service)):
    await service.remove_item(item_id)
    return {"message": "Item removed from cart"}


@router.delete("", response_model=CartClearedResponse)
async def clear_cart(
    owner: OwnerKey = Depends(get_owner),
    service: CartService = Depends(get_cart_service),
):
    removed = await service.clear_cart(owner)
    return CartClearedResponse(message="Cart cleared", success=True, removed=removed)
