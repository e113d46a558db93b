import logging
from datetime import datetime, timezone, timedelta
from typing import Dict, Any

import bcrypt
from bson import ObjectId
from fastapi import HTTPException, Depends, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from workforce.config import settings
from workforce.db import users_collection
from workforce.exceptions import get_user_exception

UTC = timezone.utc

logger = logging.getLogger(__name__)

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="api/auth/login")

secret_key = settings.SECRET_KEY
algorithm = settings.ALGORITHM


class Token(BaseModel):
    access_token: str
    token_type: str


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed_password.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if isinstance(hashed_password, str):
        hashed_password = hashed_password.encode('utf-8')

    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password)


def create_access_token(payload: Dict[str, Any], expiry: timedelta):
    data_to_encode = {"data": payload}
    expiry_delta = datetime.now(UTC) + expiry
    data_to_encode.update({"exp": expiry_delta})
    encoded_data: str = jwt.encode(data_to_encode, secret_key, algorithm)

    return encoded_data


async def authenticate_user(email: str, password: str):
    """
    authenticates user
    args:-
        - email: login email
        - password: plain password
    """
    user = await users_collection.find_one({"email": email.lower()})
    if not user:
        return False

    if not verify_password(plain_password=password, hashed_password=user["password"]):
        return False
    return user


async def get_current_user(token: str = Depends(oauth2_bearer)) -> tuple:
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
        data = payload.get("data")

        if data is None:
            raise HTTPException(status_code=401, detail="Invalid token data.")

        user_id: str = data.get("sub")
        if user_id is None or not ObjectId.is_valid(user_id):
            raise get_user_exception()

        user = await users_collection.find_one({"_id": ObjectId(user_id)})
        if not user:
            raise HTTPException(status_code=401, detail="User not found.")

        if not user.get("is_active", True):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

        return user, user.get("role")

    except JWTError as e:
        logger.warning("JWT error: %s", e)
        raise HTTPException(status_code=401, detail="JWT Error - could not validate user.")


def require_roles(*roles: str):
    """Dependency factory restricting an endpoint to the given roles."""

    async def role_checker(user_and_type: tuple = Depends(get_current_user)) -> tuple:
        _, role = user_and_type
        if role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not authorized to perform this function"
            )
        return user_and_type

    return role_checker
