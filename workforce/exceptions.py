from fastapi import HTTPException, status


def get_user_exception():
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    return credentials_exception


def get_forbidden_exception():
    forbidden_exception = HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You are not authorized to perform this function"
    )
    return forbidden_exception


def get_unknown_entity_exception(entity: str = "Entity"):
    entity_exception = HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity} not found"
    )
    return entity_exception


def get_invalid_id_exception(entity: str = "record"):
    id_exception = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Invalid {entity} ID"
    )
    return id_exception
