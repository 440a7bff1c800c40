"""
Voice Coach Module for NeuralStride.

Purpose:
    Decide when spoken posture feedback is warranted and hand the chosen
    message to the session's SpeechChannel.

Separation of Concerns:
    - FeedbackStateMachine is pure decision logic: a score goes in, zero or
      more message keys come out. It never speaks.
    - VoiceCoach maps keys to VOICE_MESSAGES and speaks them, and owns the
      non-reactive announcements (session start/end, breaks, encouragement).

Tier Rules (score -> tier):
    good  : score >= 75
    fair  : 50 <= score < 75
    poor  : score < 50

Announcements fire only on a tier change, never on the first sample of a
session. Independently, scores below 35 build a critical streak; the fifth
consecutive one escalates and the streak starts over.

Author: NeuralStride Engineering
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging
import random

from neuralstride.config.defaults import (
    SCORING_SETTINGS,
    VOICE_MESSAGES,
    BREAK_REMINDERS,
    ENCOURAGEMENT_MESSAGES,
)
from neuralstride.monitoring.speech import SpeechChannel

logger = logging.getLogger(__name__)

GOOD = "good"
FAIR = "fair"
POOR = "poor"


def classify_tier(score: float, settings=SCORING_SETTINGS) -> str:
    """Feedback tier for a posture score."""
    if score >= settings['good_threshold']:
        return GOOD
    if score >= settings['fair_threshold']:
        return FAIR
    return POOR


@dataclass
class FeedbackTierState:
    """
    Attributes:
        current_tier: Tier of the most recent sample (None before the first).
        previous_tier: Tier the last sample was compared against (None = no sample yet).
        consecutive_poor_count: Length of the current run of critical scores.
    """
    current_tier: Optional[str] = None
    previous_tier: Optional[str] = None
    consecutive_poor_count: int = 0


class FeedbackStateMachine:
    """
    Hysteretic tier tracker plus critical-streak escalation.

    evaluate(score) returns the message keys to speak for this sample, in
    order: at most one tier-change key, then possibly 'critical'.
    """

    def __init__(self, settings=SCORING_SETTINGS):
        self.settings = dict(settings)
        self.state = FeedbackTierState()

    def evaluate(self, score: float) -> List[str]:
        messages: List[str] = []
        tier = classify_tier(score, self.settings)
        previous = self.state.current_tier

        if previous is None:
            # First sample of the session: remember it, say nothing
            logger.debug("First detection, initial tier %s", tier)
        elif tier != previous:
            key = self._transition_message(previous, tier)
            if key:
                messages.append(key)
            logger.debug("Tier changed %s -> %s (score %s)", previous, tier, score)

        self.state.previous_tier = previous
        self.state.current_tier = tier

        if score < self.settings['critical_threshold']:
            self.state.consecutive_poor_count += 1
            if self.state.consecutive_poor_count == self.settings['critical_streak']:
                messages.append("critical")
                self.state.consecutive_poor_count = 0
        else:
            self.state.consecutive_poor_count = 0

        return messages

    @staticmethod
    def _transition_message(previous: str, tier: str) -> Optional[str]:
        if tier == POOR:
            return "declining"
        if tier == FAIR:
            return "improving" if previous == POOR else "needs_adjustment"
        if tier == GOOD and previous != GOOD:
            return "excellent"
        return None

    def reset(self) -> None:
        """Forget tier history and the critical streak (used when a session stops)."""
        self.state = FeedbackTierState()


class VoiceCoach:
    """Spoken posture coaching for one foreground session."""

    def __init__(self, speech: SpeechChannel, state_machine: Optional[FeedbackStateMachine] = None,
                 rng: Optional[random.Random] = None):
        self.speech = speech
        self.state_machine = state_machine or FeedbackStateMachine()
        self.rng = rng or random.Random()

    @property
    def enabled(self) -> bool:
        return self.speech.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.speech.enabled = bool(value)

    def provide_posture_feedback(self, score: float) -> List[str]:
        """
        Advance the tier state with a new score and speak whatever it decides.

        The state advances even while voice is off, so unmuting never replays
        a stale transition. Returns the spoken texts.
        """
        keys = self.state_machine.evaluate(score)
        spoken = []
        for key in keys:
            text = VOICE_MESSAGES[key]
            if self.speech.speak(text):
                spoken.append(text)
        return spoken

    def provide_break_reminder(self) -> Optional[str]:
        if not self.enabled:
            return None
        text = self.rng.choice(BREAK_REMINDERS)
        return text if self.speech.speak(text) else None

    def provide_encouragement(self, average_score: float) -> Optional[str]:
        if not self.enabled:
            return None
        for minimum, text in ENCOURAGEMENT_MESSAGES:
            if average_score >= minimum:
                return text if self.speech.speak(text) else None
        return None

    def announce_session_start(self) -> Optional[str]:
        text = VOICE_MESSAGES['session_start']
        return text if self.speech.speak(text) else None

    def announce_session_end(self, duration_seconds: float, average_score: float) -> Optional[str]:
        text = VOICE_MESSAGES['session_end'].format(
            minutes=int(duration_seconds // 60),
            score=int(average_score + 0.5),
        )
        return text if self.speech.speak(text) else None

    def reset(self) -> None:
        self.state_machine.reset()
