from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from shared.storage.base import Storage
from shared.storage.dependencies import get_storage
from .schemas import OrderDetailResponse, OrderRequest, OrderResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

def get_order_service(storage: Storage = Depends(get_storage)) -> OrderService:
    return OrderService(storage)


@router.post("", response_model=OrderResponse)
async def create_order(payload: OrderRequest, service: OrderService = Depends(get_order_service)):
    return await service.create_order(payload.order, payload.items)


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    customer_id: Optional[int] = Query(default=None, alias="customerId"),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_orders(customer_id)


@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    order = await service.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
