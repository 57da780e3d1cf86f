from sqlalchemy import select, or_

from storefront.data.models.user import UserModel
from storefront.repos.base import BaseRepo


class UserRepo(BaseRepo):
    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_username(self, username: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.username == username)
        ).scalar_one_or_none()

    def find_conflicting(self, username: str | None, email: str | None, exclude_id: int | None = None):
        conds = []
        if username:
            conds.append(UserModel.username == username)
        if email:
            conds.append(UserModel.email == email)
        if not conds:
            return None

        stmt = select(UserModel).where(or_(*conds))
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)
        return self.db.execute(stmt.limit(1)).scalar_one_or_none()

    def list_users(self) -> list[UserModel]:
        return list(
            self.db.execute(select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())).scalars()
        )

    def add_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user

    def delete_user(self, user: UserModel):
        self.db.delete(user)
        self.db.flush()
