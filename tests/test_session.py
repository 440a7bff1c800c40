import pytest

from conftest import FakeSpeechBackend, landmarks_at_angle
from neuralstride.bridge import messages
from neuralstride.bridge.extension_bridge import ExtensionBridge
from neuralstride.bridge.transport import InProcessTransport, UnavailableTransport
from neuralstride.config.defaults import DETECTOR_ERROR_MESSAGE, VOICE_MESSAGES
from neuralstride.core.processing import STATUS_INIT_FAILED, STATUS_OK
from neuralstride.monitoring.session import BREAK_TASK, PostureSession
from neuralstride.monitoring.speech import SpeechChannel
from neuralstride.monitoring.voice_coach import VoiceCoach


@pytest.fixture
def speech_backend():
    return FakeSpeechBackend()


@pytest.fixture
def session(background, scheduler, speech_backend):
    return PostureSession(
        coach=VoiceCoach(SpeechChannel(speech_backend)),
        bridge=ExtensionBridge(InProcessTransport(background.handle_external_message)),
        scheduler=scheduler,
    )


def status(background):
    return background.handle_message(messages.get_status())


def test_start_marks_background_monitoring(session, background, speech_backend):
    session.start()
    assert status(background)["isMonitoring"] is True
    assert speech_backend.spoken == [VOICE_MESSAGES['session_start']]
    assert session.scheduler.is_scheduled(BREAK_TASK)


def test_frames_are_pushed_and_coached(session, background, speech_backend):
    session.start()
    metrics = session.process_landmarks(landmarks_at_angle(175))
    assert metrics.posture_score == 100
    assert status(background)["currentScore"] == 100

    session.process_landmarks(landmarks_at_angle(145))
    assert status(background)["currentScore"] == 40
    assert speech_backend.spoken[-1] == VOICE_MESSAGES['declining']


def test_plant_grows_only_while_person_detected(clock, session):
    session.start()
    session.process_landmarks(landmarks_at_angle(175))
    clock.advance(5)
    session.run_pending()
    assert session.plant_state.health == 55

    session.process_landmarks(None)
    assert session.metrics.is_person_detected is False
    clock.advance(5)
    session.run_pending()
    assert session.plant_state.health == 55


def test_no_person_frame_is_pushed_as_zero(session, background):
    session.start()
    session.process_landmarks(landmarks_at_angle(175))
    session.process_landmarks(None)
    assert status(background)["currentScore"] == 0
    assert background.store.get_value("lastPostureData")["detected"] is False


def test_stop_resets_background_and_coach(clock, session, background, speech_backend):
    session.start()
    for angle in (175, 175, 145):
        session.process_landmarks(landmarks_at_angle(angle))
    clock.advance(125)
    session.stop()

    assert status(background) == {"isMonitoring": False, "currentScore": 0, "plantState": "dormant"}
    assert speech_backend.spoken[-1] == (
        "Session complete. You worked for 2 minutes with an average posture score of 80. Great effort!")
    assert session.coach.state_machine.state.current_tier is None
    assert not session.scheduler.is_scheduled(BREAK_TASK)


def test_plant_frozen_across_sessions(clock, session):
    session.start()
    session.process_landmarks(landmarks_at_angle(175))
    clock.advance(3)
    session.run_pending()
    session.stop()
    clock.advance(10)
    session.run_pending()
    session.start()
    assert session.plant_state.health == 53


def test_frames_ignored_when_not_streaming(session, background):
    session.process_landmarks(landmarks_at_angle(175))
    assert status(background)["currentScore"] == 50


def test_session_runs_without_background(scheduler, speech_backend):
    session = PostureSession(
        coach=VoiceCoach(SpeechChannel(speech_backend)),
        bridge=ExtensionBridge(UnavailableTransport()),
        scheduler=scheduler,
    )
    session.start()
    metrics = session.process_landmarks(landmarks_at_angle(150))
    assert metrics.posture_score == 50
    session.stop()


def test_session_started_at_time_zero_reports_full_duration(clock, session, speech_backend):
    assert clock() == 0
    session.start()
    session.process_landmarks(landmarks_at_angle(175))
    clock.advance(180)
    session.stop()
    assert speech_backend.spoken[-1] == (
        "Session complete. You worked for 3 minutes with an average posture score of 100. Great effort!")


def test_detector_failure_is_exposed_on_the_session(session):
    session.start()
    session.process_landmarks(None, STATUS_INIT_FAILED)
    assert session.error == DETECTOR_ERROR_MESSAGE
    assert session.metrics.is_person_detected is False

    session.process_landmarks(landmarks_at_angle(175), STATUS_OK)
    assert session.error is None
