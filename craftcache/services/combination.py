"""Memoized pair combination.

`CombinationService.combine` looks a pair up in the cache and only calls the
injected compute function on a miss. Results are recorded with insert-if-absent
on both tables, so concurrent callers (threads or processes sharing one
database) agree on a single durable result per pair and a single first
discovery per element.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from ..errors import ComputeFailure, InvalidIdentifier
from ..models import Pair, PairResolution
from . import element_store, pair_cache
from .pair_key import canonicalize, validate_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementProduced:
    name: str
    icon: str
    # Upstream's own "first time anyone made this" flag; informational only
    upstream_new: bool = False


@dataclass(frozen=True)
class NoResult:
    pass


@dataclass(frozen=True)
class CombinationOutcome:
    result_name: str
    icon: str
    is_new_discovery: bool

    def to_dict(self) -> dict:
        return {
            "result": self.result_name,
            "icon": self.icon,
            "is_new_discovery": self.is_new_discovery,
        }


@dataclass(frozen=True)
class NoCombination:
    left: str
    right: str

    def to_dict(self) -> dict:
        return {"result": None, "left": self.left, "right": self.right}


Compute = Callable[[str, str], Union[ElementProduced, NoResult]]


def _from_record(record: Pair) -> CombinationOutcome | NoCombination:
    if record.resolution is PairResolution.WITHOUT_RESULT:
        return NoCombination(record.left, record.right)
    return CombinationOutcome(record.result, record.element.icon, False)


class CombinationService:
    def __init__(self, compute: Compute):
        self.compute = compute

    def _run_compute(self, left: str, right: str) -> ElementProduced | NoResult:
        try:
            produced = self.compute(left, right)
        except ComputeFailure:
            raise
        except Exception as e:
            raise ComputeFailure(f"compute failed for {left!r}+{right!r}: {e}") from e

        if isinstance(produced, NoResult):
            return produced
        if not isinstance(produced, ElementProduced):
            raise ComputeFailure(
                f"compute returned {type(produced).__name__} for {left!r}+{right!r}"
            )
        try:
            validate_name(produced.name)
        except InvalidIdentifier as e:
            raise ComputeFailure(f"compute produced an invalid name: {e.message}") from e
        if not isinstance(produced.icon, str):
            raise ComputeFailure(
                f"compute produced a non-string icon for {produced.name!r}: {produced.icon!r}"
            )
        return produced

    def combine(self, a: str, b: str) -> CombinationOutcome | NoCombination:
        validate_name(a)
        validate_name(b)
        left, right = canonicalize(a, b)

        cached = pair_cache.lookup(left, right)
        if cached is not None:
            logger.debug("combine_cache_hit left=%s right=%s result=%s", left, right, cached.result)
            return _from_record(cached)

        produced = self._run_compute(left, right)

        if isinstance(produced, NoResult):
            record, won = pair_cache.insert_if_absent(left, right, None)
            if not won and record.result is not None:
                logger.warning(
                    "combine_conflicting_result left=%s right=%s kept=%s discarded=None",
                    left, right, record.result,
                )
            logger.info("combine left=%s right=%s result=None", left, right)
            return _from_record(record)

        element, element_first = element_store.insert_if_absent(produced.name, produced.icon)
        record, pair_won = pair_cache.insert_if_absent(left, right, produced.name)
        if not pair_won:
            # Another caller recorded this pair first; its result stands.
            if record.result != produced.name:
                logger.warning(
                    "combine_conflicting_result left=%s right=%s kept=%s discarded=%s",
                    left, right, record.result, produced.name,
                )
            return _from_record(record)

        if element_first:
            if produced.upstream_new:
                logger.info("Discovered new element: %s (from %s and %s)", element.name, left, right)
            else:
                logger.info("New element: %s (from %s and %s)", element.name, left, right)
        logger.info(
            "combine left=%s right=%s result=%s is_new_discovery=%s",
            left, right, element.name, element_first,
        )
        return CombinationOutcome(element.name, element.icon, element_first)
