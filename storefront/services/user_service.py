# storefront/services/user_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import DuplicateUser, UserNotFound, ValidationError
from storefront.domain.schemas import UserRegister, UserUpdate
from storefront.repos.user_repo import UserRepo
from storefront.services.order_service import OrderService
from storefront.services.passwords import hash_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.orders = OrderService(db)

    def list_users(self) -> list[UserModel]:
        return self.repo.list_users()

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        return user

    def register_user(self, payload: UserRegister) -> UserModel:
        if self.repo.find_conflicting(payload.username, payload.email):
            raise DuplicateUser()

        user = UserModel(
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
        )

        try:
            self.repo.add_user(user)
            self.repo.commit()
        except IntegrityError:
            # concurrent registration won the unique index
            self.repo.rollback()
            raise DuplicateUser()

        self.repo.refresh(user)
        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    def update_user(self, user_id: int, payload: UserUpdate) -> UserModel:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ValidationError("No fields to update")

        user = self.get_user(user_id)

        if self.repo.find_conflicting(changes.get("username"), changes.get("email"), exclude_id=user.id):
            raise DuplicateUser()

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            self.repo.flush()
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise DuplicateUser()

        self.repo.refresh(user)
        logger.info(f"Updated user {user.id}: {sorted(changes)}")
        return user

    def delete_user(self, user_id: int) -> UserModel:
        user = self.get_user(user_id)
        try:
            # orders go with the user via FK cascade; their stock comes back first
            released = self.orders.release_user_orders(user.id)
            self.repo.delete_user(user)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Deleted user {user_id}, released stock of {released} orders")
        return user
