import logging
import uuid
from datetime import datetime, timezone

import bcrypt
from sqlalchemy import create_engine, Column, ForeignKey, String, Text
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from jokes_app import config

logger = logging.getLogger(__name__)

engine = create_engine(config.DATABASE_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DBUser(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(String, default=_now)


class DBJoke(Base):
    __tablename__ = "jokes"

    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    jokester_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(String, default=_now, index=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session():
    """Returns a direct session, mostly used for non-request contexts like init_db"""
    return SessionLocal()


def init_db(seed: bool = False):
    Base.metadata.create_all(bind=engine)

    if seed:
        db = get_session()
        try:
            if db.query(DBJoke).count() == 0:
                _seed_jokes(db)
        finally:
            db.close()

    logger.info("Database initialized at %s", config.DATABASE_PATH)


def _seed_jokes(db: Session):
    kody = db.query(DBUser).filter(DBUser.username == "kody").first()
    if kody is None:
        password_hash = bcrypt.hashpw(b"twixrox", bcrypt.gensalt(config.BCRYPT_ROUNDS)).decode()
        kody = DBUser(username="kody", password_hash=password_hash)
        db.add(kody)
        db.flush()

    default_jokes = [
        {
            "name": "Road worker",
            "content": "I never wanted to believe that my Dad was stealing from his job as a road worker. But when I got home, all the signs were there.",
        },
        {
            "name": "Frisbee",
            "content": "I was wondering why the frisbee was getting bigger, then it hit me.",
        },
        {
            "name": "Trees",
            "content": "Why do trees seem suspicious on sunny days? Dunno, they're just a bit shady.",
        },
        {
            "name": "Skeletons",
            "content": "Why don't skeletons ride roller coasters? They don't have the stomach for it.",
        },
        {
            "name": "Hippos",
            "content": "Why don't you find hippopotamuses hiding in trees? They're really good at it.",
        },
        {
            "name": "Dinner",
            "content": "What did one plate say to the other plate? Dinner is on me!",
        },
        {
            "name": "Elevator",
            "content": "My first time using an elevator was an uplifting experience. The second time let me down.",
        },
    ]
    for item in default_jokes:
        db.add(DBJoke(**item, jokester_id=kody.id))
    db.commit()
    logger.info("Seeded %d default jokes", len(default_jokes))
