import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.errors import InfrastructureError

logger = logging.getLogger(__name__)


@contextmanager
def persisting(session: Session, operation: str) -> Iterator[Session]:
    """
    Run a unit of work and commit it, or roll everything back.

    Database errors are logged and re-raised as InfrastructureError so the
    caller never sees a partial commit or a driver exception. Domain errors
    raised inside the block roll back and propagate unchanged.
    Usage:
        with persisting(db, "cart.add"):
            ... mutate ORM objects ...
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("%s failed while persisting", operation, exc_info=True)
        raise InfrastructureError(f"{operation} failed") from exc
    except Exception:
        session.rollback()
        raise
