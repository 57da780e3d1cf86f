# storefront/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StoreError
from storefront.domain.schemas import (
    OrderCreate,
    OrderItemOut,
    OrderItemUpdate,
    OrderOut,
    OrderUpdate,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user_id: Optional[int] = Query(None, alias="userId", gt=0),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(user_id)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    current: Optional[UserModel] = Depends(get_current_user),
):
    """
    Places an order for payload.userId, or for the logged-in user when
    userId is omitted. Stock for every line is taken atomically.
    """
    user_id = payload.user_id or (current.id if current else None)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized - Please log in")

    try:
        return get_service(db).create_order(
            user_id,
            payload.items,
            shipping_address=payload.shipping_address,
            billing_address=payload.billing_address,
        )
    except StoreError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_order(order_id)
    except StoreError as e:
        raise to_http(e)


@router.put("/{order_id}", response_model=OrderOut)
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    try:
        return get_service(db).update_order(
            order_id,
            status=payload.status.value if payload.status else None,
            shipping_address=payload.shipping_address,
            billing_address=payload.billing_address,
        )
    except StoreError as e:
        raise to_http(e)


@router.delete("/{order_id}", response_model=OrderOut)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).delete_order(order_id)
    except StoreError as e:
        raise to_http(e)


@router.get("/{order_id}/items", response_model=List[OrderItemOut])
def list_order_items(order_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).list_order_items(order_id)
    except StoreError as e:
        raise to_http(e)


@router.put("/{order_id}/items/{item_id}", response_model=OrderItemOut)
def update_order_item(
    order_id: int,
    item_id: int,
    payload: OrderItemUpdate,
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).update_order_item(order_id, item_id, payload.quantity)
    except StoreError as e:
        raise to_http(e)


@router.delete("/{order_id}/items/{item_id}", response_model=OrderItemOut)
def delete_order_item(order_id: int, item_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).delete_order_item(order_id, item_id)
    except StoreError as e:
        raise to_http(e)
