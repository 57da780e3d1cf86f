# storefront/repos/cart_repo.py
from sqlalchemy import select

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.repos.base import BaseRepo


class CartRepo(BaseRepo):
    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def list_carts(self) -> list[CartModel]:
        return list(
            self.db.execute(select(CartModel).order_by(CartModel.created_at.desc(), CartModel.id.desc())).scalars()
        )

    def get_active_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id, CartModel.status == "active")
            .order_by(CartModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def get_active_cart_by_session(self, session_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.session_id == session_id, CartModel.status == "active")
            .order_by(CartModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def get_other_active_cart(self, cart: CartModel) -> CartModel | None:
        owner = (
            CartModel.user_id == cart.user_id
            if cart.user_id is not None
            else CartModel.session_id == cart.session_id
        )
        return self.db.execute(
            select(CartModel)
            .where(owner, CartModel.status == "active", CartModel.id != cart.id)
            .limit(1)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def delete_cart(self, cart: CartModel):
        # items may have been re-pointed at another cart; reload before cascading
        self.db.expire(cart, ["items"])
        self.db.delete(cart)
        self.db.flush()

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_cart_item_by_id(self, cart_id: int, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.id == item_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel):
        self.db.delete(item)
        self.db.flush()
