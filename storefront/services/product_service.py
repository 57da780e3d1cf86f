# storefront/services/product_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    CategoryNotFound,
    ProductInUse,
    ProductNotFound,
    ValidationError,
)
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    def list_products(self, category_id: int | None = None) -> list[ProductModel]:
        return self.repo.list_products(category_id)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def _check_category(self, category_id: int | None):
        if category_id is not None and not self.categories.get_category(category_id):
            raise CategoryNotFound(category_id)

    def create_product(self, payload: ProductCreate) -> ProductModel:
        self._check_category(payload.category_id)

        product = ProductModel(**payload.model_dump())
        try:
            self.repo.add_product(product)
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ValidationError(f"Product with sku {payload.sku!r} already exists")

        self.repo.refresh(product)
        logger.info(f"Created product {product.id} ({product.name}), stock {product.stock}")
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        changes = payload.model_dump(exclude_unset=True)
        # price, stock and flags are NOT NULL columns
        for field in ("name", "price", "stock", "is_active"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        if not changes:
            raise ValidationError("No fields to update")

        product = self.get_product(product_id)
        self._check_category(changes.get("category_id"))

        for field, value in changes.items():
            setattr(product, field, value)

        try:
            self.repo.flush()
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ValidationError("Product update violates a constraint")

        self.repo.refresh(product)
        logger.info(f"Updated product {product.id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: int) -> ProductModel:
        product = self.get_product(product_id)

        # order history keeps its product rows
        if self.repo.is_ordered(product_id):
            raise ProductInUse(product_id)

        try:
            self.repo.delete_product(product)
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ProductInUse(product_id)

        logger.info(f"Deleted product {product_id}")
        return product
