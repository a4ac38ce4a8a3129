"""Request principal.

Tokens are issued and checked by the auth layer in front of this service,
which forwards the authenticated user id in ``X-User-Id``.
"""
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User

user_id_header = APIKeyHeader(name="X-User-Id", auto_error=False)


def get_current_user(
    user_id: str | None = Security(user_id_header),
    db: Session = Depends(get_db),
) -> User:
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    try:
        uid = int(user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid X-User-Id header")
    user = db.get(User, uid)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return user
