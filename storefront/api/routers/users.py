# storefront/api/routers/users.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_user
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StoreError
from storefront.domain.schemas import UserOut, UserRegister, UserUpdate
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.get("/profile", response_model=UserOut)
def profile(user: UserModel = Depends(require_user)):
    return user


@router.post("", response_model=UserOut, status_code=201)
@router.post("/register", response_model=UserOut, status_code=201)
def register_user(payload: UserRegister, db: Session = Depends(get_db)):
    try:
        return UserService(db).register_user(payload)
    except StoreError as e:
        raise to_http(e)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        return UserService(db).get_user(user_id)
    except StoreError as e:
        raise to_http(e)


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    try:
        return UserService(db).update_user(user_id, payload)
    except StoreError as e:
        raise to_http(e)


@router.delete("/{user_id}", response_model=UserOut)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    try:
        return UserService(db).delete_user(user_id)
    except StoreError as e:
        raise to_http(e)
