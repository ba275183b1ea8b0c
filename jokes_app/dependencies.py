from fastapi import Depends
from sqlalchemy.orm import Session

from jokes_app.database import get_db
from jokes_app.session import SessionService
from jokes_app.store import JokeStore


def get_store(db: Session = Depends(get_db)) -> JokeStore:
    return JokeStore(db)


def get_sessions(store: JokeStore = Depends(get_store)) -> SessionService:
    return SessionService(store)
