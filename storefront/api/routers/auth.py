# storefront/api/routers/auth.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_auth_service, get_session_token
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import LoginIn, LoginOut, MessageOut
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.utils.settings import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    db: Session = Depends(get_db),
):
    """
    Checks username/password, opens a server-side session and sets its cookie.
    When guestCartId is sent, that guest cart is merged into the user's cart.
    """
    try:
        user, token = auth.login(payload.username, payload.password)
    except StoreError as e:
        raise to_http(e)

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )

    if payload.guest_cart_id is not None:
        try:
            CartService(db).merge_guest_cart(payload.guest_cart_id, user.id)
        except StoreError as e:
            # login still stands; a stale guest cart id is not fatal
            logger.warning(f"Guest cart {payload.guest_cart_id} not merged for user {user.id}: {e}")

    return {"message": "Login successful", "user": user}


@router.post("/logout", response_model=MessageOut)
def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
):
    auth.logout(token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logout successful"}
