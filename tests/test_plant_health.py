import pytest

from neuralstride.monitoring.plant_health import (
    PlantHealthSimulator,
    health_delta,
    stage_for_health,
)
from neuralstride.monitoring.voice_coach import classify_tier


@pytest.mark.parametrize("score, delta", [
    (100, 1.0), (75, 1.0), (74, -0.8), (50, -0.8), (49, -2.0), (30, -2.0), (29, -3.5), (0, -3.5),
])
def test_health_delta_brackets(score, delta):
    assert health_delta(score) == delta


@pytest.mark.parametrize("health, stage", [
    (100, 5), (80, 5), (79.9, 4), (60, 4), (59.9, 3), (40, 3), (39.9, 2), (20, 2), (19.9, 1), (0, 1),
])
def test_stage_breakpoints(health, stage):
    assert stage_for_health(health) == stage


def test_stage_and_tier_are_separate_classifications():
    # score 75 is a "good" tier, but a plant at health 75 is only stage 4
    assert classify_tier(75) == "good"
    assert stage_for_health(75) == 4


def test_ten_good_ticks_add_ten(scheduler):
    plant = PlantHealthSimulator(scheduler)
    plant.update_score(100)
    for _ in range(10):
        plant.tick()
    assert plant.state.health == 60
    assert plant.state.stage == 4


def test_health_clamped_at_100(scheduler):
    plant = PlantHealthSimulator(scheduler, initial_health=95)
    plant.update_score(100)
    for _ in range(10):
        plant.tick()
    assert plant.state.health == 100
    assert plant.state.stage == 5


def test_ten_critical_ticks_remove_35(scheduler):
    plant = PlantHealthSimulator(scheduler)
    plant.update_score(0)
    for _ in range(10):
        plant.tick()
    assert plant.state.health == 15
    assert plant.state.stage == 1


def test_health_clamped_at_zero(scheduler):
    plant = PlantHealthSimulator(scheduler, initial_health=20)
    plant.update_score(0)
    for _ in range(10):
        plant.tick()
    assert plant.state.health == 0
    assert plant.state.stage == 1


def test_stage_depends_only_on_health(scheduler):
    climbed = PlantHealthSimulator(scheduler, initial_health=30)
    climbed.update_score(90)
    for _ in range(12):
        climbed.tick()

    fell = PlantHealthSimulator(scheduler, initial_health=48)
    fell.update_score(90)
    fell.tick()
    fell.update_score(0)
    fell.tick()
    fell.tick()

    assert climbed.state.health == fell.state.health == 42
    assert climbed.state.stage == fell.state.stage == 3


def test_scheduled_ticks_follow_the_clock(clock, scheduler):
    plant = PlantHealthSimulator(scheduler)
    plant.update_score(80)
    plant.start()
    clock.advance(10)
    scheduler.run_pending()
    assert plant.state.health == 60


def test_stop_freezes_without_reset(clock, scheduler):
    plant = PlantHealthSimulator(scheduler)
    plant.update_score(0)
    plant.start()
    clock.advance(2)
    scheduler.run_pending()
    plant.stop()
    clock.advance(30)
    scheduler.run_pending()
    assert plant.state.health == 43
    assert not plant.running
