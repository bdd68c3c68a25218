import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..config import STARTER_ELEMENTS
from ..errors import InvalidIdentifier, StorageError
from ..models import db, Element
from .pair_key import validate_name

logger = logging.getLogger(__name__)


def _find(name: str) -> Optional[Element]:
    return db.session.get(Element, name)


def get(name: str) -> Optional[Element]:
    validate_name(name)
    return _find(name)


def insert_if_absent(name: str, icon: str) -> Tuple[Element, bool]:
    """Store an element unless one with this name exists.

    Returns the stored element and whether this call created it. When two
    callers race on the same name the primary key decides: the loser's commit
    fails with IntegrityError, it rolls back and reads the winner's row.
    """
    validate_name(name)
    if not isinstance(icon, str):
        raise InvalidIdentifier(f"icon for {name!r} must be a string")

    existing = _find(name)
    if existing is not None:
        return existing, False

    element = Element(name=name, icon=icon)
    db.session.add(element)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        winner = _find(name)
        if winner is None:
            raise StorageError(f"could not store element {name!r}: {e.orig}") from e
        logger.info("element_insert_lost_race name=%s", name)
        return winner, False
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(f"could not store element {name!r}: {e}") from e

    logger.info("element_inserted name=%s icon=%s", name, icon)
    return element, True


def insert_all_if_absent(entries) -> List[str]:
    """Insert every absent (name, icon) in a single transaction.

    Returns the inserted names. On any storage error nothing is written.
    """
    fresh = []
    for name, icon in entries:
        validate_name(name)
        if not isinstance(icon, str):
            raise InvalidIdentifier(f"icon for {name!r} must be a string")
        if name in fresh or _find(name) is not None:
            continue
        db.session.add(Element(name=name, icon=icon))
        fresh.append(name)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(f"could not store {len(fresh)} elements: {e}") from e
    for name in fresh:
        logger.info("element_inserted name=%s", name)
    return fresh


def count() -> int:
    return db.session.query(Element).count()


def all_names() -> List[str]:
    rows = db.session.query(Element.name).order_by(Element.name.asc()).all()
    return [r[0] for r in rows]


def list_elements(like: Optional[str] = None) -> List[Element]:
    q = Element.query
    if like:
        q = q.filter(Element.name.like(f"%{like}%"))
    return q.order_by(Element.name.asc()).all()


def seed(elements=STARTER_ELEMENTS) -> int:
    """Insert the starting elements. Returns how many were new."""
    created = 0
    for name, icon in elements:
        _, first = insert_if_absent(name, icon)
        if first:
            created += 1
    return created
