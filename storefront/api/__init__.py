# storefront/api/__init__.py
from fastapi import APIRouter

from storefront.api.routers import auth, carts, categories, checkout, orders, products, users


def build_api_router() -> APIRouter:
    api = APIRouter(prefix="/api")
    api.include_router(auth.router)
    api.include_router(users.router)
    api.include_router(products.router)
    api.include_router(categories.router)
    api.include_router(carts.router)
    api.include_router(orders.router)
    api.include_router(checkout.router)
    return api
