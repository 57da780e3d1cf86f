# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, Request

from storefront.api.deps import get_payment_client
from storefront.api.errors import to_http
from storefront.domain.errors import StoreError
from storefront.domain.schemas import (
    CheckoutIn,
    CheckoutSessionOut,
    PaymentIntentIn,
    PaymentIntentOut,
)
from storefront.services.payment_client import PaymentClient
from storefront.utils.settings import FRONTEND_URL

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("", response_model=CheckoutSessionOut)
def create_checkout_session(
    payload: CheckoutIn,
    request: Request,
    payments: PaymentClient = Depends(get_payment_client),
):
    origin = request.headers.get("origin") or FRONTEND_URL
    try:
        return payments.create_checkout_session(payload.items, origin)
    except StoreError as e:
        raise to_http(e)


@router.get("/sessions/{session_id}")
def get_checkout_session(
    session_id: str,
    payments: PaymentClient = Depends(get_payment_client),
):
    try:
        return payments.retrieve_checkout_session(session_id)
    except StoreError as e:
        raise to_http(e)


@router.post("/create-payment-intent", response_model=PaymentIntentOut)
def create_payment_intent(
    payload: PaymentIntentIn,
    payments: PaymentClient = Depends(get_payment_client),
):
    try:
        return payments.create_payment_intent(payload.items)
    except StoreError as e:
        raise to_http(e)
