from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.core import security
from app.core.config import settings
from app.db.mongodb import get_database
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.token import TokenPayload

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/login/access-token")


async def get_current_user(
    db: AsyncIOMotorDatabase = Depends(get_database),
    token: str = Depends(oauth2_scheme)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = security.decode_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise credentials_exception

    if token_data.sub is None or token_data.type != security.TOKEN_TYPE_ACCESS:
        raise credentials_exception

    user = await UserRepository(db).get_by_id(token_data.sub)
    if user is None:
        raise credentials_exception

    if security.is_revoked(payload, user.last_logout_at):
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user
