# storefront/services/passwords.py
from passlib.context import CryptContext

pwd = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd.verify(password, password_hash)
    except ValueError:
        # malformed or unknown hash format stored for this user
        return False
