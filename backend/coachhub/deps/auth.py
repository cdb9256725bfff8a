# coachhub/deps/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose.exceptions import ExpiredSignatureError, JWTError

from coachhub.db import get_db
from coachhub.models import User, UserRole
from coachhub.security import decode_token

# Exposes Bearer auth in Swagger; login endpoint issues the token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    unauth = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        sub = payload.get("sub")
        if sub is None:
            raise unauth
        user = db.get(User, int(sub))
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (JWTError, ValueError):
        raise unauth

    if not user:
        raise unauth
    return user

def require_role(*allowed_roles: UserRole):
    """
    Usage: dependencies=[Depends(require_role(UserRole.instructor, UserRole.admin))]
    """
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return current_user
    return dependency

# Instructors and admins manage content; clients consume it
require_staff = require_role(UserRole.instructor, UserRole.admin)

def require_user_or_role(*allowed_roles: UserRole):
    """
    Owner-or-admin style guard for routes with a ``{user_id}`` path param.

    Usage:
      @router.get("/users/{user_id}")
      def get_user(user_id: int, current=Depends(require_user_or_role(UserRole.admin))):
          ...
    """
    def dependency(user_id: int, current_user: User = Depends(get_current_user)) -> User:
        if current_user.id == user_id:
            return current_user
        if current_user.role in allowed_roles:
            return current_user
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    return dependency
