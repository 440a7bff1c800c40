"""
Standalone score drift for the background monitor.

When no live session is feeding scores, the background keeps its badge alive
with a bounded random walk of the last known score.
"""

from __future__ import annotations
from typing import Optional
import random

from neuralstride.config.defaults import SIMULATION_SETTINGS

DORMANT = "dormant"


def plant_state_for_score(score: float, is_monitoring: bool) -> str:
    """Badge/icon word for the background plant."""
    if not is_monitoring:
        return DORMANT
    if score >= 85:
        return "bloom"
    if score >= 70:
        return "flowering"
    if score >= 50:
        return "growing"
    if score >= 30:
        return "sprout"
    return "wilting"


def has_live_update_within(last_live_update: Optional[float], now: float, window: float) -> bool:
    """True if a live score arrived less than `window` seconds ago."""
    return last_live_update is not None and (now - last_live_update) < window


class DriftSimulator:
    """
    Bounded random walk: each step moves the score by uniform(-max_step, max_step)
    and clamps it to [0, 100].

    step() also reports whether the score just dropped under the wilting
    threshold. That report is one-shot: it re-arms only after the score has
    come back to or above the threshold.
    """

    def __init__(self, score: float = SIMULATION_SETTINGS['initial_score'],
                 max_step: float = SIMULATION_SETTINGS['max_step'],
                 wilting_threshold: float = SIMULATION_SETTINGS['wilting_threshold'],
                 rng: Optional[random.Random] = None):
        self.score = float(score)
        self.max_step = max_step
        self.wilting_threshold = wilting_threshold
        self.rng = rng or random.Random()
        self._wilting_reported = False

    def step(self) -> bool:
        """Advance one tick. Returns True when a wilting alert is due."""
        delta = self.rng.uniform(-self.max_step, self.max_step)
        self.score = max(0.0, min(100.0, self.score + delta))
        return self.check_wilting()

    def check_wilting(self) -> bool:
        if self.score < self.wilting_threshold:
            if not self._wilting_reported:
                self._wilting_reported = True
                return True
            return False
        self._wilting_reported = False
        return False

    def reset_to(self, score: float) -> None:
        """Continue the walk from an externally supplied score."""
        self.score = max(0.0, min(100.0, float(score)))
