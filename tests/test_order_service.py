from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from storefront.data.database import Base, build_engine
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    InsufficientStock,
    InvalidLineItem,
    InvalidStatusTransition,
    OrderNotEditable,
    OrderNotFound,
    ProductUnavailable,
    UserNotFound,
)
from storefront.domain.schemas import OrderItemIn, ProductCreate, ProductUpdate, UserRegister
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService


def stock_of(db, product_id):
    db.expire_all()
    return db.get(ProductModel, product_id).stock


def line(product, quantity, price=None):
    return OrderItemIn(product_id=product.id, quantity=quantity, price_at_time=price)


def test_create_order_decrements_stock_and_snapshots_price(db, make_user, make_product):
    user = make_user()
    a = make_product("A", price="12.50", stock=10)
    b = make_product("B", price="3.00", stock=4)

    order = OrderService(db).create_order(user.id, [line(a, 3), line(b, 4)])

    assert order["status"] == "pending"
    assert [i["quantity"] for i in order["items"]] == [3, 4]
    assert order["items"][0]["price_at_time"] == Decimal("12.50")
    assert order["items"][0]["product_name"] == "A"
    assert order["total_amount"] == Decimal("49.50")
    assert stock_of(db, a.id) == 7
    assert stock_of(db, b.id) == 0


def test_last_unit_scenario(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)
    svc = OrderService(db)

    svc.create_order(user.id, [line(product, 5)])
    assert stock_of(db, product.id) == 0

    with pytest.raises(InsufficientStock):
        svc.create_order(user.id, [line(product, 1)])

    assert stock_of(db, product.id) == 0
    assert len(OrderRepo(db).list_orders()) == 1


def test_order_is_all_or_nothing(db, make_user, make_product):
    user = make_user()
    plenty = make_product("plenty", stock=5)
    scarce = make_product("scarce", stock=1)

    with pytest.raises(InsufficientStock) as exc:
        OrderService(db).create_order(user.id, [line(plenty, 2), line(scarce, 3)])

    assert exc.value.product_id == scarce.id
    assert stock_of(db, plenty.id) == 5
    assert stock_of(db, scarce.id) == 1
    assert OrderRepo(db).list_orders() == []


def test_duplicate_lines_share_the_same_stock(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=3)

    with pytest.raises(InsufficientStock):
        OrderService(db).create_order(user.id, [line(product, 2), line(product, 2)])

    assert stock_of(db, product.id) == 3


def test_unknown_user_is_rejected(db, make_product):
    product = make_product()
    with pytest.raises(UserNotFound):
        OrderService(db).create_order(999, [line(product, 1)])


def test_missing_and_inactive_products_are_unavailable(db, make_user, make_product):
    user = make_user()
    hidden = make_product("hidden", is_active=False)
    svc = OrderService(db)

    with pytest.raises(ProductUnavailable):
        svc.create_order(user.id, [OrderItemIn(product_id=12345, quantity=1)])
    with pytest.raises(ProductUnavailable):
        svc.create_order(user.id, [line(hidden, 1)])

    assert stock_of(db, hidden.id) == 5


def test_invalid_line_items(db, make_user, make_product):
    user = make_user()
    product = make_product()
    svc = OrderService(db)

    with pytest.raises(InvalidLineItem):
        svc.create_order(user.id, [])
    with pytest.raises(InvalidLineItem):
        svc.create_order(user.id, [OrderItemIn.model_construct(product_id=product.id, quantity=0)])
    with pytest.raises(InvalidLineItem):
        svc.create_order(user.id, [OrderItemIn.model_construct(product_id=None, quantity=1)])

    assert stock_of(db, product.id) == 5


def test_explicit_price_overrides_current_price(db, make_user, make_product):
    user = make_user()
    product = make_product(price="10.00")

    order = OrderService(db).create_order(user.id, [line(product, 2, price=Decimal("7.25"))])

    assert order["items"][0]["price_at_time"] == Decimal("7.25")
    assert order["total_amount"] == Decimal("14.50")


def test_price_at_time_survives_price_change(db, make_user, make_product):
    user = make_user()
    product = make_product(price="10.00")
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 1)])

    ProductService(db).update_product(product.id, ProductUpdate(price=Decimal("99.00")))
    item_id = order["items"][0]["id"]
    svc.update_order_item(order["id"], item_id, 2)

    reloaded = svc.get_order(order["id"])
    assert reloaded["items"][0]["price_at_time"] == Decimal("10.00")
    assert reloaded["total_amount"] == Decimal("20.00")


def test_delete_order_restores_stock(db, make_user, make_product):
    user = make_user()
    a = make_product("A", stock=5)
    b = make_product("B", stock=8)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(a, 2), line(b, 8)])

    svc.delete_order(order["id"])

    assert stock_of(db, a.id) == 5
    assert stock_of(db, b.id) == 8
    with pytest.raises(OrderNotFound):
        svc.get_order(order["id"])


def test_update_item_applies_only_the_delta(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=10)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 4)])
    item_id = order["items"][0]["id"]

    svc.update_order_item(order["id"], item_id, 9)
    assert stock_of(db, product.id) == 1

    svc.update_order_item(order["id"], item_id, 2)
    assert stock_of(db, product.id) == 8


def test_update_item_beyond_stock_rolls_back(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 3)])
    item_id = order["items"][0]["id"]

    with pytest.raises(InsufficientStock):
        svc.update_order_item(order["id"], item_id, 6)

    assert stock_of(db, product.id) == 2
    assert svc.list_order_items(order["id"])[0]["quantity"] == 3


def test_delete_item_restores_stock_and_total(db, make_user, make_product):
    user = make_user()
    a = make_product("A", price="5.00", stock=5)
    b = make_product("B", price="2.00", stock=5)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(a, 1), line(b, 3)])

    b_item = next(i for i in order["items"] if i["product_id"] == b.id)
    svc.delete_order_item(order["id"], b_item["id"])

    assert stock_of(db, b.id) == 5
    remaining = svc.get_order(order["id"])
    assert [i["product_id"] for i in remaining["items"]] == [a.id]
    assert remaining["total_amount"] == Decimal("5.00")


def test_cancel_restores_stock_once(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 4)])

    svc.update_order(order["id"], status="cancelled")
    assert stock_of(db, product.id) == 5

    # repeating the same status is a no-op
    svc.update_order(order["id"], status="cancelled")
    assert stock_of(db, product.id) == 5

    svc.delete_order(order["id"])
    assert stock_of(db, product.id) == 5


def test_status_follows_the_lifecycle(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 1)])

    for status in ("confirmed", "processing", "shipped", "delivered"):
        assert svc.update_order(order["id"], status=status)["status"] == status

    with pytest.raises(InvalidStatusTransition):
        svc.update_order(order["id"], status="cancelled")
    assert svc.get_order(order["id"])["status"] == "delivered"


def test_skipping_states_is_rejected(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 1)])

    with pytest.raises(InvalidStatusTransition):
        svc.update_order(order["id"], status="shipped")
    assert svc.get_order(order["id"])["status"] == "pending"


def test_shipped_order_items_are_frozen(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)
    svc = OrderService(db)
    order = svc.create_order(user.id, [line(product, 1)])
    for status in ("confirmed", "processing", "shipped"):
        svc.update_order(order["id"], status=status)

    with pytest.raises(OrderNotEditable):
        svc.update_order_item(order["id"], order["items"][0]["id"], 2)
    with pytest.raises(OrderNotEditable):
        svc.delete_order_item(order["id"], order["items"][0]["id"])


def test_list_orders_filters_by_user(db, make_user, make_product):
    alice = make_user("alice")
    bob = make_user("bob")
    product = make_product(stock=10)
    svc = OrderService(db)
    svc.create_order(alice.id, [line(product, 1)])
    svc.create_order(bob.id, [line(product, 1)])
    svc.create_order(bob.id, [line(product, 1)])

    assert len(svc.list_orders()) == 3
    assert {o["user_id"] for o in svc.list_orders(bob.id)} == {bob.id}
    assert len(svc.list_orders(bob.id)) == 2


def test_deleting_a_user_gives_back_their_order_stock(db, make_user, make_product):
    alice = make_user("alice")
    bob = make_user("bob")
    product = make_product(stock=10)
    svc = OrderService(db)
    svc.create_order(alice.id, [line(product, 3)])
    cancelled = svc.create_order(alice.id, [line(product, 2)])
    svc.update_order(cancelled["id"], status="cancelled")
    svc.create_order(bob.id, [line(product, 4)])
    assert stock_of(db, product.id) == 3

    UserService(db).delete_user(alice.id)

    # the cancelled order already returned its units
    assert stock_of(db, product.id) == 6
    assert svc.list_orders(alice.id) == []
    assert len(svc.list_orders(bob.id)) == 1


def test_two_sessions_race_for_the_last_unit(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    with factory() as setup:
        user = UserService(setup).register_user(
            UserRegister(username="alice", password="pw123", email="alice@example.com")
        )
        product = ProductService(setup).create_product(
            ProductCreate(name="Last one", price=Decimal("9.00"), stock=1)
        )

    first, second = factory(), factory()
    try:
        # both sessions have seen the last unit before either order lands
        assert first.get(ProductModel, product.id).stock == 1
        assert second.get(ProductModel, product.id).stock == 1

        outcomes = []
        for session in (first, second):
            try:
                OrderService(session).create_order(user.id, [OrderItemIn(product_id=product.id, quantity=1)])
                outcomes.append("placed")
            except InsufficientStock:
                outcomes.append("rejected")

        assert outcomes == ["placed", "rejected"]
    finally:
        first.close()
        second.close()

    with factory() as check:
        assert check.get(ProductModel, product.id).stock == 0
        assert len(OrderRepo(check).list_orders()) == 1

    engine.dispose()
