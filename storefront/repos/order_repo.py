# storefront/repos/order_repo.py
from sqlalchemy import select

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.repos.base import BaseRepo


class OrderRepo(BaseRepo):
    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars())

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order_item(self, order_id: int, item_id: int) -> OrderItemModel | None:
        return self.db.execute(
            select(OrderItemModel).where(
                OrderItemModel.order_id == order_id,
                OrderItemModel.id == item_id,
            )
        ).scalar_one_or_none()

    def delete_order(self, order: OrderModel):
        self.db.delete(order)
        self.db.flush()
