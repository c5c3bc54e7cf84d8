"""Bearer token authentication.

Resolves the requesting user from ``Authorization: Bearer <token>``. Anonymous
requests resolve to ``None``; each route decides whether that is an error.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select

from songboard.database import get_session
from songboard.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Optional[User]:
    if credentials is None or not credentials.credentials:
        return None
    return session.exec(select(User).where(User.auth_token == credentials.credentials)).first()
