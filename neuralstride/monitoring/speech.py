"""
Speech output for the voice coach.

SpeechChannel is the single speech resource of a session: every new utterance
cancels whatever is still being spoken (last write wins, nothing is queued).
Backend failures are logged and dropped; speech is never retried.
"""

from __future__ import annotations
from typing import Optional, Protocol
import logging
import threading

from neuralstride.config.defaults import VOICE_SETTINGS

logger = logging.getLogger(__name__)

VOICE_HINTS = {
    'female': ('female', 'samantha', 'zira', 'victoria'),
    'male': ('male', 'daniel', 'david', 'alex'),
}


class SpeechBackend(Protocol):
    def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...


class SpeechChannel:
    """Cancel-then-speak wrapper around a SpeechBackend."""

    def __init__(self, backend: Optional[SpeechBackend], enabled: bool = True):
        self.backend = backend
        self.enabled = enabled
        self.last_utterance: Optional[str] = None

    def speak(self, text: str) -> bool:
        """Speak text, superseding any utterance in progress. Returns True if handed to the backend."""
        if not self.enabled or self.backend is None or not text:
            return False

        try:
            self.backend.cancel()
        except Exception as e:
            logger.debug("Speech cancel failed, continuing: %s", e)

        try:
            self.backend.speak(text)
        except Exception as e:
            logger.warning("Speech failed: %s", e)
            return False

        self.last_utterance = text
        logger.info("Speaking: %s", text)
        return True


class Pyttsx3Backend:
    """
    pyttsx3 text-to-speech on one daemon worker thread.

    The worker holds at most one pending utterance; speak() overwrites it,
    cancel() drops it and stops the engine mid-sentence.
    """

    def __init__(self, voice: str = VOICE_SETTINGS['voice'], rate: int = VOICE_SETTINGS['rate'],
                 volume: float = VOICE_SETTINGS['volume']):
        import pyttsx3

        self.engine = pyttsx3.init()
        self.engine.setProperty("rate", int(rate))
        self.engine.setProperty("volume", float(volume))
        self._select_voice(voice)

        self._pending: Optional[str] = None
        self._cv = threading.Condition()
        self._thread = threading.Thread(target=self._run, name="neuralstride-tts", daemon=True)
        self._thread.start()

    def _select_voice(self, voice: str) -> None:
        hints = VOICE_HINTS.get(voice, ())
        for candidate in self.engine.getProperty("voices") or []:
            name = (getattr(candidate, "name", "") or "").lower()
            if voice == 'male' and 'female' in name:
                continue
            if any(hint in name for hint in hints):
                self.engine.setProperty("voice", candidate.id)
                logger.debug("Using voice: %s", candidate.name)
                return
        logger.debug("No %s voice found; using default system voice", voice)

    def _run(self) -> None:
        while True:
            with self._cv:
                while self._pending is None:
                    self._cv.wait()
                text, self._pending = self._pending, None
            try:
                self.engine.say(text)
                self.engine.runAndWait()
            except Exception as e:
                logger.warning("Speech engine error: %s", e)

    def speak(self, text: str) -> None:
        with self._cv:
            self._pending = text
            self._cv.notify()

    def cancel(self) -> None:
        with self._cv:
            self._pending = None
        self.engine.stop()
