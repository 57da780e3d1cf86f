# storefront/repos/product_repo.py
from sqlalchemy import select, update, exists

from storefront.data.models.product import ProductModel
from storefront.data.models.order_item import OrderItemModel
from storefront.repos.base import BaseRepo


class ProductRepo(BaseRepo):
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self, category_id: int | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.id)
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        return list(self.db.execute(stmt).scalars())

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel):
        self.db.delete(product)
        self.db.flush()

    def is_ordered(self, product_id: int) -> bool:
        return self.db.execute(
            select(exists().where(OrderItemModel.product_id == product_id))
        ).scalar()

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Atomic decrement-if-sufficient.

        UPDATE products SET stock = stock - :q WHERE id = :id AND stock >= :q
        Returns False when no row matched (missing product or not enough stock).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(product_id)
        return result.rowcount == 1

    def increment_stock(self, product_id: int, quantity: int) -> bool:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(product_id)
        return result.rowcount == 1

    def _expire_stock(self, product_id: int):
        # a loaded ProductModel would otherwise keep the pre-update stock
        obj = self.db.identity_map.get(self.db.identity_key(ProductModel, product_id))
        if obj is not None:
            self.db.expire(obj, ["stock"])
