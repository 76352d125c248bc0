import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from caras.config import Config

logger = logging.getLogger(__name__)

DATABASE_URL = Config.DATABASE_URL


def _driver(url: str) -> str:
    return url.split("://", 1)[0]


logger.info("database driver=%s", _driver(DATABASE_URL))

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=Config.SQL_ECHO, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency to inject DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
