# app/routers/deps.py

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from app.core.config import settings
from app.core.constants import ROLE_ADMIN, ROLE_TEACHER
from app.db.exam_store import MongoExamStore
from app.db.mongo import db
from app.utils.errors import ForbiddenError, UnauthorizedRequestError

bearer_scheme = HTTPBearer()

def get_current_user(token: HTTPAuthorizationCredentials = Security(bearer_scheme)) -> dict:
    try:
        payload = jwt.decode(token.credentials, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise ForbiddenError("Could not validate credentials")

    user_id = payload.get("sub")
    if user_id is None:
        raise UnauthorizedRequestError("Invalid token")
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return {"user_id": user_id, "roles": list(roles)}


def require_teacher(current_user: dict = Depends(get_current_user)):
    if not {ROLE_ADMIN, ROLE_TEACHER} & set(current_user["roles"]):
        raise ForbiddenError("Teacher or admin access required")
    return current_user


def get_exam_store() -> MongoExamStore:
    return MongoExamStore(db)
