# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import (
    ActiveCartExists,
    CartItemNotFound,
    CartNotFound,
    CartNotModifiable,
    InsufficientStock,
    InvalidCartOwner,
    InvalidLineItem,
    ProductUnavailable,
    UserNotFound,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases for carts.

    Queries (list, get) assemble the cart view; commands (create, add,
    update, remove, delete, merge) each run in one transaction.
    Carts never touch product stock, they only validate against it.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    # query
    def _view(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)

        lines = []
        for i in items:
            price = i.product.price
            lines.append(
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "added_at": i.added_at,
                    "product_name": i.product.name,
                    "product_price": price,
                    "image_url": i.product.image_url,
                    "line_total": price * i.quantity,
                }
            )

        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "session_id": cart.session_id,
            "status": cart.status,
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
            "items": lines,
            "total": sum((line["line_total"] for line in lines), Decimal("0.00")),
        }

    def _get(self, cart_id: int) -> CartModel:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise CartNotFound(cart_id)
        return cart

    def list_carts(self) -> List[Dict[str, Any]]:
        return [self._view(c) for c in self.repo.list_carts()]

    def get_cart(self, cart_id: int) -> Dict[str, Any]:
        return self._view(self._get(cart_id))

    def get_user_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_active_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()
        return self._view(cart)

    # commands
    def create_cart(self, user_id: int | None = None, session_id: str | None = None) -> Dict[str, Any]:
        if (user_id is None) == (session_id is None):
            raise InvalidCartOwner("Exactly one of userId or sessionId is required")

        if user_id is not None:
            if not self.users.get_user(user_id):
                raise UserNotFound(user_id)
            existing = self.repo.get_active_cart_by_user(user_id)
        else:
            existing = self.repo.get_active_cart_by_session(session_id)

        # one active cart per owner
        if existing:
            logger.info(f"Owner already has active cart {existing.id}")
            return self._view(existing)

        cart = CartModel(user_id=user_id, session_id=session_id, status="active")
        try:
            self.repo.create_cart(cart)
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ActiveCartExists()
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(cart)
        logger.info(f"Created cart {cart.id} (user={user_id}, session={session_id})")
        return self._view(cart)

    def _available_product(self, product_id: int):
        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise ProductUnavailable(product_id)
        return product

    def _modifiable(self, cart_id: int) -> CartModel:
        cart = self._get(cart_id)
        if cart.status != "active":
            raise CartNotModifiable(cart.id, cart.status)
        return cart

    def add_item(self, cart_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if not product_id or quantity is None or quantity <= 0:
            raise InvalidLineItem("productId and a positive quantity are required")

        cart = self._modifiable(cart_id)

        try:
            product = self._available_product(product_id)
            existing = self.repo.get_cart_item(cart.id, product_id)
            wanted = quantity + (existing.quantity if existing else 0)

            # re-validated against current stock on every add
            if product.stock < wanted:
                raise InsufficientStock(product_id, wanted, product.stock)

            if existing:
                logger.info(
                    f"Product {product_id} already in cart {cart.id}, "
                    f"quantity {existing.quantity} -> {wanted}"
                )
                existing.quantity = wanted
            else:
                logger.info(f"Adding product {product_id} x{quantity} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
                )

            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        return self.get_cart(cart.id)

    def update_cart(
        self,
        cart_id: int,
        status: str | None = None,
        product_id: int | None = None,
        quantity: int | None = None,
    ) -> Dict[str, Any]:
        """Sets the status and/or sets (not adds to) one item's quantity."""
        cart = self._get(cart_id)

        if (product_id is None) != (quantity is None):
            raise InvalidLineItem("productId and quantity must be given together")

        try:
            if product_id is not None:
                if quantity <= 0:
                    raise InvalidLineItem("quantity must be positive")
                if cart.status != "active":
                    raise CartNotModifiable(cart.id, cart.status)

                product = self._available_product(product_id)
                if product.stock < quantity:
                    raise InsufficientStock(product_id, quantity, product.stock)

                existing = self.repo.get_cart_item(cart.id, product_id)
                if existing:
                    existing.quantity = quantity
                else:
                    self.repo.add_cart_item(
                        CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
                    )

            if status is not None:
                if status == "active" and cart.status != "active":
                    other = self.repo.get_other_active_cart(cart)
                    if other:
                        raise ActiveCartExists(other.id)
                cart.status = status

            self.repo.flush()
            self.repo.commit()
        except IntegrityError:
            # u_active_cart_* caught a concurrent reactivation
            self.repo.rollback()
            if status == "active":
                raise ActiveCartExists()
            raise
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(cart)
        return self.get_cart(cart.id)

    def remove_item(self, cart_id: int, item_id: int) -> Dict[str, Any]:
        cart = self._get(cart_id)
        item = self.repo.get_cart_item_by_id(cart.id, item_id)
        if not item:
            raise CartItemNotFound(item_id)

        try:
            self.repo.delete_cart_item(item)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Removed item {item_id} from cart {cart.id}")
        return self.get_cart(cart.id)

    def delete_cart(self, cart_id: int) -> Dict[str, Any]:
        cart = self._get(cart_id)
        snapshot = self._view(cart)

        try:
            self.repo.delete_cart(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Deleted cart {cart_id}")
        return snapshot

    def merge_guest_cart(self, guest_cart_id: int, user_id: int) -> Dict[str, Any]:
        """
        Moves every item of a guest (session) cart into the user's active
        cart, creating that cart if needed, then deletes the guest cart.
        A product present in both carts ends up as one row with the
        quantities summed.
        """
        if not self.users.get_user(user_id):
            raise UserNotFound(user_id)

        guest = self._get(guest_cart_id)
        if guest.session_id is None:
            raise InvalidCartOwner(f"Cart {guest.id} is not a guest cart")

        try:
            target = self.repo.get_active_cart_by_user(user_id)
            if not target:
                target = self.repo.create_cart(CartModel(user_id=user_id, status="active"))

            moved = 0
            for item in self.repo.get_cart_items(guest.id):
                existing = self.repo.get_cart_item(target.id, item.product_id)
                if existing:
                    existing.quantity += item.quantity
                    self.repo.delete_cart_item(item)
                else:
                    item.cart_id = target.id
                moved += 1

            self.repo.flush()
            self.repo.delete_cart(guest)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Merged guest cart {guest_cart_id} into cart {target.id} of user {user_id} ({moved} items)")
        self.repo.refresh(target)
        return self._view(target)
