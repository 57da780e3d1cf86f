# storefront/services/category_service.py
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.domain.errors import CategoryNotFound, ValidationError
from storefront.domain.schemas import CategoryCreate, CategoryUpdate
from storefront.repos.category_repo import CategoryRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def list_categories(self) -> list[CategoryModel]:
        return self.repo.list_categories()

    def get_category(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise CategoryNotFound(category_id)
        return category

    def create_category(self, payload: CategoryCreate) -> CategoryModel:
        if payload.parent_category_id is not None:
            self.get_category(payload.parent_category_id)

        category = CategoryModel(**payload.model_dump())
        try:
            self.repo.add_category(category)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(category)
        logger.info(f"Created category {category.id} ({category.name})")
        return category

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryModel:
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No fields to update")

        category = self.get_category(category_id)

        parent_id = changes.get("parent_category_id")
        if parent_id is not None:
            if parent_id == category.id:
                raise ValidationError("Category cannot be its own parent")
            self.get_category(parent_id)

        for field, value in changes.items():
            setattr(category, field, value)

        try:
            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(category)
        return category

    def delete_category(self, category_id: int) -> CategoryModel:
        category = self.get_category(category_id)
        try:
            self.repo.delete_category(category)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Deleted category {category_id}")
        return category
