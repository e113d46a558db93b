import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from workforce.config import settings
from workforce.utils.app_utils import Token, authenticate_user, create_access_token, get_current_user
from workforce.utils.query_utils import serialize_document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Handles user authentication and generates JWT access token.
    Args:
        form_data (OAuth2PasswordRequestForm): Form containing username (email) and password
    Returns:
        dict: Contains the generated access token and token type
            {
                "access_token": str,
                "token_type": "bearer"
            }
    Raises:
        HTTPException:
            - 401: If login credentials are invalid
            - 403: If the account has been deactivated
    """
    user = await authenticate_user(email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login details",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    expiry_time = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(payload={"sub": str(user["_id"]), "role": user.get("role")}, expiry=expiry_time)

    logger.info("User %s logged in", user["email"])

    return {"access_token": token, "token_type": "bearer"}


@router.get("/me")
async def get_me(user_and_type: tuple = Depends(get_current_user)):
    user, _ = user_and_type
    return {"success": True, "user": serialize_document(user)}
