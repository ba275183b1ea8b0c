"""
Cookie session service.

The session cookie holds a signed JWT whose only claim of interest is the
user id. Passwords are hashed with bcrypt.
"""

import logging
import time
from typing import Optional

import bcrypt
import jwt
from fastapi import Request
from fastapi.responses import RedirectResponse

from jokes_app import config
from jokes_app.database import DBUser
from jokes_app.exceptions import UnauthorizedException
from jokes_app.store import JokeStore

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds or config.BCRYPT_ROUNDS)).decode()


def check_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


class SessionService:
    def __init__(
        self,
        store: JokeStore,
        secret_key: str = None,
        max_age: int = None,
        cookie_name: str = None,
        secure: bool = None,
    ):
        self.store = store
        self.secret_key = secret_key or config.SECRET_KEY
        self.max_age = max_age if max_age is not None else config.SESSION_MAX_AGE_SECONDS
        self.cookie_name = cookie_name or config.SESSION_COOKIE_NAME
        self.secure = config.SESSION_COOKIE_SECURE if secure is None else secure

    # --------------- Tokens ---------------

    def create_token(self, user_id: str) -> str:
        now = time.time()
        payload = {
            "user_id": user_id,
            "iat": now,
            "exp": now + self.max_age,
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def get_user_id(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except jwt.InvalidTokenError:
            return None
        user_id = payload.get("user_id")
        return user_id if isinstance(user_id, str) and user_id else None

    def require_user_id(self, request: Request) -> str:
        user_id = self.get_user_id(request)
        if not user_id:
            raise UnauthorizedException()
        return user_id

    def get_user(self, request: Request) -> Optional[DBUser]:
        user_id = self.get_user_id(request)
        if not user_id:
            return None
        return self.store.get_user(user_id)

    # --------------- Credentials ---------------

    def login(self, username: str, password: str) -> Optional[DBUser]:
        user = self.store.find_user(username)
        if not user or not check_password(password, user.password_hash):
            logger.info("Failed login for %r", username)
            return None
        return user

    def register(self, username: str, password: str) -> Optional[DBUser]:
        user = self.store.create_user(username, hash_password(password))
        if user:
            logger.info("Registered user %r", username, extra={"user_id": user.id})
        return user

    # --------------- Responses ---------------

    def create_user_session(self, user_id: str, redirect_to: str) -> RedirectResponse:
        response = RedirectResponse(redirect_to, status_code=303)
        response.set_cookie(
            self.cookie_name,
            self.create_token(user_id),
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
            secure=self.secure,
            path="/",
        )
        return response

    def logout(self, request: Request) -> RedirectResponse:
        response = RedirectResponse("/", status_code=303)
        response.delete_cookie(self.cookie_name, path="/")
        user_id = self.get_user_id(request)
        if user_id:
            logger.info("Logged out", extra={"user_id": user_id})
        return response
