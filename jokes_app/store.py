"""Data access for jokes and users, one instance per request session."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jokes_app.database import DBJoke, DBUser

logger = logging.getLogger(__name__)


class JokeStore:
    def __init__(self, db: Session):
        self.db = db

    # ── Jokes ────────────────────────────────────────────────────────────────

    def count_jokes(self) -> int:
        return self.db.query(DBJoke).count()

    def find_jokes(self, take: int, skip: int = 0) -> List[DBJoke]:
        """Window over all jokes in insertion order."""
        return (
            self.db.query(DBJoke)
            .order_by(DBJoke.created_at, DBJoke.id)
            .offset(skip)
            .limit(take)
            .all()
        )

    def latest_jokes(self, limit: int = 5) -> List[DBJoke]:
        return self.db.query(DBJoke).order_by(DBJoke.created_at.desc()).limit(limit).all()

    def get_joke(self, joke_id: str) -> Optional[DBJoke]:
        return self.db.query(DBJoke).filter(DBJoke.id == joke_id).first()

    def create_joke(self, name: str, content: str, jokester_id: str) -> DBJoke:
        joke = DBJoke(name=name, content=content, jokester_id=jokester_id)
        try:
            self.db.add(joke)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(joke)
        return joke

    # ── Users ────────────────────────────────────────────────────────────────

    def find_user(self, username: str) -> Optional[DBUser]:
        return self.db.query(DBUser).filter(DBUser.username == username).first()

    def get_user(self, user_id: str) -> Optional[DBUser]:
        return self.db.query(DBUser).filter(DBUser.id == user_id).first()

    def create_user(self, username: str, password_hash: str) -> Optional[DBUser]:
        """Insert a user. Returns None if the username was taken in the meantime."""
        user = DBUser(username=username, password_hash=password_hash)
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Username %r already taken at insert time", username)
            return None
        self.db.refresh(user)
        return user
