# storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import (
    CartOut,
    CartUpdateIn,
    CreateCartIn,
    ItemIn,
    MergeCartIn,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=List[CartOut])
def list_carts(db: Session = Depends(get_db)):
    return get_service(db).list_carts()


@router.post("", response_model=CartOut, status_code=201)
def create_cart(payload: CreateCartIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_cart(user_id=payload.user_id, session_id=payload.session_id)
    except StoreError as e:
        raise to_http(e)


@router.get("/user/{user_id}", response_model=CartOut)
def get_user_cart(user_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_user_cart(user_id)
    except StoreError as e:
        raise to_http(e)


@router.post("/merge/{user_id}", response_model=CartOut)
def merge_cart(user_id: int, payload: MergeCartIn, db: Session = Depends(get_db)):
    """Moves a guest cart's items into the user's cart and deletes the guest cart."""
    try:
        return get_service(db).merge_guest_cart(payload.guest_cart_id, user_id)
    except StoreError as e:
        raise to_http(e)


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(cart_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_cart(cart_id)
    except StoreError as e:
        raise to_http(e)


@router.put("/{cart_id}", response_model=CartOut)
def update_cart(cart_id: int, payload: CartUpdateIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).update_cart(
            cart_id,
            status=payload.status,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except StoreError as e:
        raise to_http(e)


@router.delete("/{cart_id}", response_model=CartOut)
def delete_cart(cart_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).delete_cart(cart_id)
    except StoreError as e:
        raise to_http(e)


@router.post("/{cart_id}/items", response_model=CartOut, status_code=201)
def add_item(cart_id: int, payload: ItemIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).add_item(cart_id, payload.product_id, payload.quantity)
    except StoreError as e:
        raise to_http(e)


@router.delete("/{cart_id}/items/{item_id}", response_model=CartOut)
def remove_item(cart_id: int, item_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).remove_item(cart_id, item_id)
    except StoreError as e:
        raise to_http(e)
