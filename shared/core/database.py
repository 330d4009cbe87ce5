from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import settings

Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url, connect_args={"check_same_thread": False}
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,    # max temporary extra connections
        pool_timeout=30               # wait time before failing
    )


# Storefront DB, only when configured; JSON files are used otherwise
storefront_engine = build_engine(
    settings.DATABASE_URL) if settings.DATABASE_URL else None
StorefrontSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=storefront_engine) if storefront_engine else None


def create_tables():
    if storefront_engine is None:
        return
    Base.metadata.create_all(bind=storefront_engine)
