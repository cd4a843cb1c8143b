from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from config import DATABASE_URL

# Declarative base
Base = declarative_base()


def crear_engine(url: str = DATABASE_URL):
    """Engine sincronico. SQLite en memoria comparte una unica conexion."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def crear_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def crear_tablas(engine) -> None:
    # los modelos tienen que estar importados antes del create_all
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
