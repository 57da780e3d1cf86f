# storefront/domain/errors.py
"""
Domain errors raised by services.

Routers translate them at the request boundary:
NotFoundError -> 404, ValidationError -> 400, AuthenticationError -> 401,
PaymentGatewayError -> 502.
"""


class StoreError(Exception):
    pass


class NotFoundError(StoreError, LookupError):
    pass


class ValidationError(StoreError, ValueError):
    pass


class AuthenticationError(StoreError):
    pass


class PaymentGatewayError(StoreError):
    pass


# not found
class UserNotFound(NotFoundError):
    def __init__(self, user_id=None):
        super().__init__("User not found")
        self.user_id = user_id


class ProductNotFound(NotFoundError):
    def __init__(self, product_id=None):
        super().__init__("Product not found")
        self.product_id = product_id


class CategoryNotFound(NotFoundError):
    def __init__(self, category_id=None):
        super().__init__("Category not found")
        self.category_id = category_id


class CartNotFound(NotFoundError):
    def __init__(self, cart_id=None):
        super().__init__("Cart not found")
        self.cart_id = cart_id


class CartItemNotFound(NotFoundError):
    def __init__(self, item_id=None):
        super().__init__("Cart item not found")
        self.item_id = item_id


class OrderNotFound(NotFoundError):
    def __init__(self, order_id=None):
        super().__init__("Order not found")
        self.order_id = order_id


class OrderItemNotFound(NotFoundError):
    def __init__(self, item_id=None):
        super().__init__("Order item not found")
        self.item_id = item_id


# validation
class InvalidLineItem(ValidationError):
    pass


class ProductUnavailable(ValidationError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} is not available")
        self.product_id = product_id


class InsufficientStock(ValidationError):
    def __init__(self, product_id, requested: int, available: int | None = None):
        msg = f"Insufficient stock for product {product_id}"
        if available is not None:
            msg += f" (requested {requested}, available {available})"
        super().__init__(msg)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class DuplicateUser(ValidationError):
    def __init__(self):
        super().__init__("User with this username or email already exists")


class InvalidCartOwner(ValidationError):
    pass


class CartNotModifiable(ValidationError):
    def __init__(self, cart_id, status: str):
        super().__init__(f"Cart {cart_id} is {status} and cannot be modified")
        self.cart_id = cart_id
        self.status = status


class InvalidStatusTransition(ValidationError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change order status from {current} to {requested}")
        self.current = current
        self.requested = requested


class OrderNotEditable(ValidationError):
    def __init__(self, order_id, status: str):
        super().__init__(f"Order {order_id} is {status} and its items cannot be changed")
        self.order_id = order_id
        self.status = status


class ProductInUse(ValidationError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} is referenced by existing orders")
        self.product_id = product_id


class CheckoutError(ValidationError):
    pass


class ActiveCartExists(ValidationError):
    def __init__(self, cart_id=None):
        msg = "Owner already has an active cart"
        if cart_id is not None:
            msg += f" ({cart_id})"
        super().__init__(msg)
        self.cart_id = cart_id
