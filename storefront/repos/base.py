# storefront/repos/base.py
from sqlalchemy.orm import Session


class BaseRepo:
    """Holds the request-scoped session; services decide when to commit."""

    def __init__(self, db: Session):
        self.db = db

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, obj):
        self.db.refresh(obj)
        return obj
