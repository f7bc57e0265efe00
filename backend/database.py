import os
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

DATA_DIR = Path(os.environ.get('DATA_DIR', str(ROOT_DIR.parent / 'data')))
DATA_DIR.mkdir(parents=True, exist_ok=True)

DATABASE_URL = os.environ.get('DATABASE_URL') or f"sqlite:///{DATA_DIR / 'data.sqlite'}"
DB_SSL = os.environ.get('DB_SSL', 'false').lower() in ('1', 'true', 'yes')


def _connect_args(url: str) -> dict:
    if url.startswith('sqlite'):
        return {"check_same_thread": False}
    if DB_SSL:
        return {"sslmode": "require"}
    return {}


engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def is_unique_violation(exc: Exception) -> bool:
    orig = getattr(exc, 'orig', exc)
    if getattr(orig, 'pgcode', None) == '23505':
        return True
    message = str(orig).lower()
    return 'unique constraint' in message or 'duplicate key' in message


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
