import importlib
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# model modules that must be imported before create_all
MODEL_MODULES = [
    "storefront.models.user",
    "storefront.models.product",
    "storefront.models.review",
    "storefront.models.cart",
    "storefront.models.cart_item",
]


class Store:
    """
    Persistence handle: owns the engine and the session factory.

    Constructed explicitly by the application factory and closed on
    shutdown; nothing here lives at module level.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        return cls(settings.DATABASE_URL)

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "Store":
        if self.is_open:
            return self
        url = self.database_url
        # hosted postgres often hands out the legacy scheme
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        if url.startswith("sqlite"):
            self.engine = create_engine(
                url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_engine(url, echo=self.echo, pool_pre_ping=True)
        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        logger.info("Store opened (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Store closed")
        self.engine = None
        self._session_factory = None

    def init_schema(self, reset: bool = False) -> None:
        """Import every model module and create missing tables.

        With ``reset`` all tables are dropped first.
        """
        for mod in MODEL_MODULES:
            importlib.import_module(mod)
        if reset:
            logger.warning("Dropping all tables (reset requested)")
            Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready: %s", sorted(Base.metadata.tables))

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Store is not open")
        return self._session_factory()

    def ping(self) -> bool:
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database ping failed")
            return False

    def __enter__(self) -> "Store":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_db(request: Request) -> Iterator[Session]:
    db = get_store(request).session()
    try:
        yield db
    finally:
        db.close()
