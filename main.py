"""
NeuralStride - Real-time posture coaching with a posture plant
Entry point for the desktop application
"""
from neuralstride.utils.logging_config import configure_silent_logging, configure_app_logging
configure_silent_logging()

import logging
import time

import cv2 as cv

from neuralstride.bridge.background import BackgroundContext
from neuralstride.bridge.extension_bridge import ExtensionBridge
from neuralstride.bridge.transport import InProcessTransport
from neuralstride.config.defaults import DETECTOR_ERROR_MESSAGE, VOICE_SETTINGS
from neuralstride.core import processing
from neuralstride.monitoring.alert_system import AlertSystem
from neuralstride.monitoring.session import PostureSession
from neuralstride.monitoring.speech import Pyttsx3Backend, SpeechChannel
from neuralstride.monitoring.timer_manager import TickScheduler
from neuralstride.monitoring.voice_coach import VoiceCoach
from neuralstride.utils.camera import CameraManager
from neuralstride.utils.storage import JsonFileStore
from neuralstride.utils.system_notifier import SystemNotifier

logger = logging.getLogger("neuralstride.app")


def create_speech_backend():
    try:
        return Pyttsx3Backend(voice=VOICE_SETTINGS['voice'])
    except Exception as e:
        logger.warning("Speech unavailable, continuing without voice: %s", e)
        return None


class NeuralStrideApp:
    """Desktop application: one camera session plus the background monitor in-process"""

    def __init__(self, settings_path: str = "./neuralstride_settings.json"):
        self.camera_manager = CameraManager()
        self.scheduler = TickScheduler()

        store = JsonFileStore(settings_path)
        self.background = BackgroundContext(scheduler=self.scheduler, store=store)
        self.background.alert_system = AlertSystem(
            notifier=SystemNotifier(),
            cooldowns={"plant_wilting": 60.0},
            enabled=self.background.notifications_enabled,
        )
        if store.get_value("settings") is None:
            self.background.on_install()

        settings = store.get_value("settings") or {}
        speech = SpeechChannel(create_speech_backend(), enabled=settings.get("voiceEnabled", True))
        self.session = PostureSession(
            coach=VoiceCoach(speech),
            bridge=ExtensionBridge(InProcessTransport(self.background.handle_external_message)),
            scheduler=self.scheduler,
        )
        self.running = False

    def initialize(self) -> bool:
        """Initialize all components"""
        logger.info("Initializing NeuralStride...")

        if not self.camera_manager.initialize():
            logger.error("Could not initialize camera")
            return False

        if not processing.ensure_detector():
            logger.error(processing.detector_error() or DETECTOR_ERROR_MESSAGE)
            print(DETECTOR_ERROR_MESSAGE)
            return False

        logger.info("NeuralStride initialized successfully!")
        return True

    def run(self):
        """Run the monitoring loop"""
        print("Press 'q' to quit, 'v' to toggle voice, 'p' to pause/resume")
        self.running = True
        self.session.start()

        while self.running:
            ret, bgr_frame = self.camera_manager.read_frame()
            if not ret or bgr_frame is None:
                logger.error("Could not read frame")
                break

            timestamp_ms = int(time.monotonic() * 1000)
            annotated, landmarks, _metrics, status = processing.process_frame(bgr_frame, timestamp_ms)
            if self.session.is_streaming:
                self.session.process_landmarks(landmarks, status)
            self.scheduler.run_pending()

            plant = self.session.plant_state
            cv.putText(annotated, f"Plant stage {plant.stage}  health {plant.health:.0f}",
                       (20, 80), cv.FONT_HERSHEY_SIMPLEX, 0.8, (235, 235, 235), 2)
            cv.imshow('NeuralStride', annotated)

            key = cv.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            elif key == ord('v'):
                self.session.coach.enabled = not self.session.coach.enabled
                logger.info("Voice %s", "on" if self.session.coach.enabled else "off")
            elif key == ord('p'):
                if self.session.is_streaming:
                    self.session.stop()
                else:
                    self.session.start()

        self.cleanup()

    def cleanup(self):
        """Clean up resources"""
        logger.info("Cleaning up...")
        self.running = False
        self.session.stop()
        self.camera_manager.release()
        processing.release_detector()
        cv.destroyAllWindows()
        logger.info("NeuralStride stopped")


def main():
    """Main function"""
    configure_app_logging()
    app = NeuralStrideApp()

    if app.initialize():
        try:
            app.run()
        except KeyboardInterrupt:
            print("\nInterrupted by user")
            app.cleanup()
    else:
        print("Failed to initialize NeuralStride")


if __name__ == "__main__":
    main()
