from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from shopgo.api.deps import (
    get_current_user_id,
    get_get_user_order_use_case,
    get_list_user_orders_use_case,
)
from shopgo.api.schemas.orders import OrderListResponse, OrderResponse
from shopgo.application.dto.orders import GetUserOrderInput, ListUserOrdersInput
from shopgo.application.use_cases.get_user_order import GetUserOrderUseCase
from shopgo.application.use_cases.list_user_orders import ListUserOrdersUseCase
from shopgo.domain.exceptions import NotFoundError


router = APIRouter()


@router.get("/v1/orders", response_model=OrderListResponse)
def list_orders(
    user_id: str = Depends(get_current_user_id),
    use_case: ListUserOrdersUseCase = Depends(get_list_user_orders_use_case),
):
    outputs = use_case.execute(ListUserOrdersInput(user_id=user_id))
    return OrderListResponse(orders=[asdict(output) for output in outputs])


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
    use_case: GetUserOrderUseCase = Depends(get_get_user_order_use_case),
):
    try:
        output = use_case.execute(GetUserOrderInput(user_id=user_id, order_id=order_id))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return OrderResponse(**asdict(output))
