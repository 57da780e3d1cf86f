# storefront/domain/order_status.py
from enum import Enum

from storefront.domain.errors import InvalidStatusTransition


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

# item quantities may only change before the parcel leaves
EDITABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


def check_transition(current: str, target: str) -> OrderStatus:
    """Returns the target status, raising InvalidStatusTransition when it is not reachable."""
    cur = OrderStatus(current)
    try:
        tgt = OrderStatus(target)
    except ValueError:
        raise InvalidStatusTransition(current, target)

    if not can_transition(cur, tgt):
        raise InvalidStatusTransition(cur.value, tgt.value)

    return tgt
