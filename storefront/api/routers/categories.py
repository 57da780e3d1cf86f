# storefront/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import CategoryCreate, CategoryOut, CategoryUpdate
from storefront.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CategoryService(db).list_categories()


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    try:
        return CategoryService(db).create_category(payload)
    except StoreError as e:
        raise to_http(e)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    try:
        return CategoryService(db).get_category(category_id)
    except StoreError as e:
        raise to_http(e)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    try:
        return CategoryService(db).update_category(category_id, payload)
    except StoreError as e:
        raise to_http(e)


@router.delete("/{category_id}", response_model=CategoryOut)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    try:
        return CategoryService(db).delete_category(category_id)
    except StoreError as e:
        raise to_http(e)
