import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import StorageError
from ..models import db, Element, Pair
from .pair_key import canonicalize, validate_name

logger = logging.getLogger(__name__)


def _find(left: str, right: str) -> Optional[Pair]:
    return db.session.get(Pair, (left, right))


def lookup(left: str, right: str) -> Optional[Pair]:
    """Cached record for the unordered pair, or None if it was never combined."""
    validate_name(left)
    validate_name(right)
    return _find(*canonicalize(left, right))


def insert_if_absent(left: str, right: str, result: Optional[str]) -> Tuple[Pair, bool]:
    """Record the resolution of a pair unless it already has one.

    `result` is None for a pair that combines into nothing. An existing row
    is never overwritten, whatever result it holds.
    """
    validate_name(left)
    validate_name(right)
    if result is not None:
        validate_name(result)
    left, right = canonicalize(left, right)

    existing = _find(left, right)
    if existing is not None:
        return existing, False

    pair = Pair(left=left, right=right, result=result)
    db.session.add(pair)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        winner = _find(left, right)
        if winner is None:
            # e.g. the result has no element row
            raise StorageError(f"could not store pair {left!r}+{right!r}: {e.orig}") from e
        logger.info("pair_insert_lost_race left=%s right=%s", left, right)
        return winner, False
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(f"could not store pair {left!r}+{right!r}: {e}") from e

    logger.info("pair_inserted left=%s right=%s result=%s", left, right, result)
    return pair, True


def count() -> int:
    return db.session.query(Pair).count()


def stats() -> Dict[str, int]:
    total = count()
    without_result = db.session.query(Pair).filter(Pair.result.is_(None)).count()
    return {
        "pairs": total,
        "with_result": total - without_result,
        "without_result": without_result,
    }


def dangling_results() -> List[Pair]:
    """Pairs whose result has no element row. Always empty on a healthy store."""
    return (
        db.session.query(Pair)
        .outerjoin(Element, Pair.result == Element.name)
        .filter(Pair.result.isnot(None), Element.name.is_(None))
        .all()
    )


def list_pairs(element: Optional[str] = None) -> List[Pair]:
    q = Pair.query
    if element:
        q = q.filter(
            (Pair.left == element) | (Pair.right == element) | (Pair.result == element)
        )
    return q.order_by(Pair.left.asc(), Pair.right.asc()).all()
