from contextlib import contextmanager
import logging
from models import db
from app.services.errors import StyleSwapError


@contextmanager
def transactional(message="DB transaction failed"):
    """Commit on success; roll back and re-raise on any error."""
    try:
        yield
        db.session.commit()
    except StyleSwapError as e:
        logging.info(f"{message}: %s", e)
        db.session.rollback()
        raise
    except Exception as e:
        logging.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise
