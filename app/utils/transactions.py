from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db


@contextmanager
def transaction(action):
    """Commit the session on success; roll back, log and re-raise on database errors."""
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.error(f"Database error while {action}", exc_info=True)
        raise
