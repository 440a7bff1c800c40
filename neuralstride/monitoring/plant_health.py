"""
Plant health simulation for the foreground session.

The posture plant gains health while posture is good and loses it faster the
worse posture gets. Its growth stage is read straight off the current health
value, with no memory of how it got there.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from neuralstride.config.defaults import PLANT_SETTINGS, TIMING_SETTINGS
from neuralstride.monitoring.timer_manager import TickScheduler

logger = logging.getLogger(__name__)

PLANT_TASK = "plant_health"


def health_delta(score: float) -> float:
    """Health change for one tick at the given posture score."""
    if score >= 75:
        return 1.0
    if score >= 50:
        return -0.8
    if score >= 30:
        return -2.0
    return -3.5


def stage_for_health(health: float, breakpoints=PLANT_SETTINGS['stage_breakpoints']) -> int:
    """Growth stage 1-5; breakpoints are listed from stage 5 down to stage 2."""
    for offset, threshold in enumerate(breakpoints):
        if health >= threshold:
            return 5 - offset
    return 1


@dataclass
class PlantState:
    health: float = PLANT_SETTINGS['initial_health']
    stage: int = stage_for_health(PLANT_SETTINGS['initial_health'])


class PlantHealthSimulator:
    """
    Advance PlantState once per tick from the latest posture score.

    The simulator only ticks while it is running; stop() freezes the state
    without resetting it.
    """

    def __init__(self, scheduler: TickScheduler, initial_health: float = PLANT_SETTINGS['initial_health'],
                 interval: float = TIMING_SETTINGS['plant_tick_interval']):
        self.scheduler = scheduler
        self.interval = interval
        self.state = PlantState(health=initial_health, stage=stage_for_health(initial_health))
        self.latest_score: float = 0

    @property
    def running(self) -> bool:
        return self.scheduler.is_scheduled(PLANT_TASK)

    def update_score(self, score: float) -> None:
        self.latest_score = score

    def start(self) -> None:
        if not self.running:
            self.scheduler.every(PLANT_TASK, self.interval, self.tick)

    def stop(self) -> None:
        self.scheduler.cancel(PLANT_TASK)

    def tick(self, now: Optional[float] = None) -> PlantState:
        health = self.state.health + health_delta(self.latest_score)
        health = max(0.0, min(100.0, health))
        stage = stage_for_health(health)
        if stage != self.state.stage:
            logger.debug("Plant stage %d -> %d (health %.1f)", self.state.stage, stage, health)
        self.state = PlantState(health=health, stage=stage)
        return self.state
