# storefront/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import (
    InsufficientStock,
    InvalidLineItem,
    OrderItemNotFound,
    OrderNotEditable,
    OrderNotFound,
    ProductUnavailable,
    UserNotFound,
)
from storefront.domain.order_status import EDITABLE_STATUSES, OrderStatus, check_transition
from storefront.domain.schemas import OrderItemIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Orders and the stock ledger.

    Every command runs in a single transaction: stock is taken with an
    atomic decrement-if-sufficient update and given back on item removal,
    cancellation or order deletion. Any failure rolls the whole command back.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    # query
    @staticmethod
    def _item_view(item: OrderItemModel) -> Dict[str, Any]:
        return {
            "id": item.id,
            "order_id": item.order_id,
            "product_id": item.product_id,
            "product_name": item.product.name if item.product else None,
            "quantity": item.quantity,
            "price_at_time": item.price_at_time,
            "line_total": item.price_at_time * item.quantity,
        }

    def _view(self, order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status,
            "total_amount": order.total_amount,
            "shipping_address": order.shipping_address,
            "billing_address": order.billing_address,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
            "items": [self._item_view(i) for i in order.items],
        }

    def _get(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, user_id: int | None = None) -> List[Dict[str, Any]]:
        return [self._view(o) for o in self.repo.list_orders(user_id)]

    def get_order(self, order_id: int) -> Dict[str, Any]:
        return self._view(self._get(order_id))

    def list_order_items(self, order_id: int) -> List[Dict[str, Any]]:
        return [self._item_view(i) for i in self._get(order_id).items]

    # helpers
    def _take_stock(self, product_id: int, quantity: int):
        if not self.products.decrement_stock(product_id, quantity):
            product = self.products.get_product(product_id)
            raise InsufficientStock(product_id, quantity, product.stock if product else None)

    def _restore_stock(self, items: Iterable[OrderItemModel]):
        for item in items:
            self.products.increment_stock(item.product_id, item.quantity)
            logger.info(f"Restored {item.quantity} units of product {item.product_id}")

    def release_user_orders(self, user_id: int) -> int:
        """
        Gives back the stock held by every non-cancelled order of a user.

        Does not commit; the caller removes the orders (directly or through
        the users FK cascade) in the same transaction.
        """
        released = 0
        for order in self.repo.list_orders(user_id):
            if order.status != OrderStatus.CANCELLED.value:
                self._restore_stock(order.items)
                released += 1
        return released

    @staticmethod
    def _recompute_total(order: OrderModel):
        order.total_amount = sum(
            (i.price_at_time * i.quantity for i in order.items), Decimal("0.00")
        )

    # commands
    def create_order(
        self,
        user_id: int,
        items: List[OrderItemIn],
        shipping_address: str | None = None,
        billing_address: str | None = None,
    ) -> Dict[str, Any]:
        """
        Creates an order from validated line items.

        All or nothing: a missing user, a bad line, an unavailable product
        or insufficient stock for any line rejects the whole order.
        priceAtTime defaults to the product's current price.
        """
        if not items:
            raise InvalidLineItem("Order must contain at least one item")

        if not self.users.get_user(user_id):
            raise UserNotFound(user_id)

        try:
            order = OrderModel(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_amount=Decimal("0.00"),
                shipping_address=shipping_address,
                billing_address=billing_address,
            )
            self.repo.add_order(order)

            for line in items:
                if not line.product_id or line.quantity is None or line.quantity <= 0:
                    raise InvalidLineItem("Each item needs a productId and a positive quantity")

                product = self.products.get_product(line.product_id)
                if not product or not product.is_active:
                    raise ProductUnavailable(line.product_id)

                price = line.price_at_time if line.price_at_time is not None else product.price

                self._take_stock(product.id, line.quantity)

                order.items.append(
                    OrderItemModel(
                        product_id=product.id,
                        quantity=line.quantity,
                        price_at_time=price,
                    )
                )

            self._recompute_total(order)
            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(order)
        logger.info(
            f"Order {order.id} created for user {user_id}: "
            f"{len(items)} items, total {order.total_amount}"
        )
        return self._view(order)

    def update_order(
        self,
        order_id: int,
        status: str | None = None,
        shipping_address: str | None = None,
        billing_address: str | None = None,
    ) -> Dict[str, Any]:
        order = self._get(order_id)

        try:
            if status is not None:
                target = check_transition(order.status, status)
                if target == OrderStatus.CANCELLED and order.status != OrderStatus.CANCELLED.value:
                    self._restore_stock(order.items)
                    logger.info(f"Order {order.id} cancelled")
                order.status = target.value

            if shipping_address is not None:
                order.shipping_address = shipping_address
            if billing_address is not None:
                order.billing_address = billing_address

            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(order)
        return self._view(order)

    def _editable(self, order_id: int) -> OrderModel:
        order = self._get(order_id)
        if OrderStatus(order.status) not in EDITABLE_STATUSES:
            raise OrderNotEditable(order.id, order.status)
        return order

    def update_order_item(self, order_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        """Changes a line's quantity; only the difference moves through stock."""
        if quantity is None or quantity <= 0:
            raise InvalidLineItem("quantity must be positive")

        order = self._editable(order_id)
        item = self.repo.get_order_item(order.id, item_id)
        if not item:
            raise OrderItemNotFound(item_id)

        delta = quantity - item.quantity

        try:
            if delta > 0:
                self._take_stock(item.product_id, delta)
            elif delta < 0:
                self.products.increment_stock(item.product_id, -delta)

            # price_at_time stays as captured
            item.quantity = quantity
            self._recompute_total(order)
            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} item {item.id}: quantity changed by {delta:+d}")
        return self._item_view(item)

    def delete_order_item(self, order_id: int, item_id: int) -> Dict[str, Any]:
        order = self._editable(order_id)
        item = self.repo.get_order_item(order.id, item_id)
        if not item:
            raise OrderItemNotFound(item_id)

        removed = self._item_view(item)

        try:
            self._restore_stock([item])
            order.items.remove(item)
            self._recompute_total(order)
            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id}: removed item {item_id}")
        return removed

    def delete_order(self, order_id: int) -> Dict[str, Any]:
        order = self._get(order_id)
        snapshot = self._view(order)

        try:
            # a cancelled order already gave its stock back
            if order.status != OrderStatus.CANCELLED.value:
                self._restore_stock(order.items)
            self.repo.delete_order(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} deleted")
        return snapshot
