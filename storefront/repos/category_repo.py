from sqlalchemy import select

from storefront.data.models.category import CategoryModel
from storefront.repos.base import BaseRepo


class CategoryRepo(BaseRepo):
    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars())

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    def delete_category(self, category: CategoryModel):
        self.db.delete(category)
        self.db.flush()
