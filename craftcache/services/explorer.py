"""Random exploration of the combination space."""
from __future__ import annotations

import logging
import random
import time
from dataclasses import asdict, dataclass

from ..config import EXPLORE_DELAY_SECONDS, EXPLORE_MAX_FAILURES, EXPLORE_MAX_IDLE_DRAWS
from ..errors import ComputeFailure
from . import element_store, pair_cache
from .combination import CombinationService, NoCombination

logger = logging.getLogger(__name__)


@dataclass
class ExploreSummary:
    draws: int = 0
    computed: int = 0
    discoveries: int = 0
    no_result: int = 0
    failures: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def explore(
    service: CombinationService,
    steps: int | None = None,
    rng: random.Random | None = None,
    delay: float = EXPLORE_DELAY_SECONDS,
    sleep=time.sleep,
    max_idle_draws: int = EXPLORE_MAX_IDLE_DRAWS,
    max_failures: int = EXPLORE_MAX_FAILURES,
) -> ExploreSummary:
    """Combine random pairs of known elements that are not cached yet.

    Stops after `steps` computed pairs (never, if None), or once
    `max_idle_draws` draws in a row land on cached pairs. Compute failures are
    counted and skipped until `max_failures` happen in a row.
    """
    rng = rng or random.Random()
    summary = ExploreSummary()
    names = element_store.all_names()
    if not names:
        logger.warning("explore: no elements stored, seed the store first")
        return summary

    idle = 0
    failures_in_row = 0
    while steps is None or summary.computed < steps:
        first = rng.choice(names)
        second = rng.choice(names)
        summary.draws += 1

        if pair_cache.lookup(first, second) is not None:
            idle += 1
            if idle >= max_idle_draws:
                logger.info("explore: %s cached draws in a row, stopping", idle)
                break
            continue
        idle = 0

        try:
            outcome = service.combine(first, second)
        except ComputeFailure as e:
            summary.failures += 1
            failures_in_row += 1
            logger.warning("explore: compute failed first=%s second=%s error=%s", first, second, e)
            if failures_in_row >= max_failures:
                raise
            sleep(delay)
            continue
        failures_in_row = 0

        summary.computed += 1
        if isinstance(outcome, NoCombination):
            summary.no_result += 1
        else:
            if outcome.is_new_discovery:
                summary.discoveries += 1
            if outcome.result_name not in names:
                names = element_store.all_names()
        sleep(delay)

    return summary
