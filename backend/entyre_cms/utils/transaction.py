# entyre_cms/utils/transaction.py
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError

from entyre_cms.extensions import db
from entyre_cms.domain.exceptions import DuplicateKey

logger = logging.getLogger(__name__)


@contextmanager
def transactional(conflict: Optional[str] = None):
    """
    Commit on success, roll back and re-raise on any error.

    With ``conflict`` set, a unique-constraint violation surfaces as
    ``DuplicateKey(conflict)`` instead of the driver's ``IntegrityError``.
    """
    try:
        yield
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if conflict is None:
            raise
        logger.info("Write rejected by unique constraint: %s", exc.orig)
        raise DuplicateKey(conflict) from exc
    except Exception:
        db.session.rollback()
        raise
