# storefront/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, CheckConstraint, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.data.database import Base

ACTIVE_ONLY = text("status = 'active'")


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # guest carts carry session_id, user carts carry user_id, never both
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    session_id = Column(String(128), nullable=True, index=True)

    status = Column(String(20), nullable=False, default="active")  # active, checkout, abandoned

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="ck_cart_single_owner",
        ),
        # at most one active cart per owner
        Index(
            "u_active_cart_user",
            "user_id",
            unique=True,
            postgresql_where=ACTIVE_ONLY,
            sqlite_where=ACTIVE_ONLY,
        ),
        Index(
            "u_active_cart_session",
            "session_id",
            unique=True,
            postgresql_where=ACTIVE_ONLY,
            sqlite_where=ACTIVE_ONLY,
        ),
    )
