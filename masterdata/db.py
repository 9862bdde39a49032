from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from masterdata.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith('sqlite'):
        return {'connect_args': {'check_same_thread': False}}
    return {
        'pool_size': settings.db_pool_size,
        'max_overflow': settings.db_max_overflow,
        'pool_pre_ping': True,
    }


engine = create_engine(settings.database_url_normalized, **_engine_options(settings.database_url_normalized))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
