"""
NeuralStride web dashboard (Streamlit + streamlit-webrtc).

The browser camera feeds the foreground PostureSession running inside the
WebRTC video processor; the sidebar plays the part of the extension popup and
only reads the background monitor's mirrored status.
"""
from neuralstride.utils.logging_config import configure_silent_logging, configure_app_logging
configure_silent_logging()  # Must be first import

import logging
import time

import av
import streamlit as st
from streamlit_webrtc import VideoProcessorBase, WebRtcMode, webrtc_streamer

from neuralstride.bridge import messages
from neuralstride.bridge.background import BackgroundContext, LockedBackground
from neuralstride.bridge.extension_bridge import ExtensionBridge
from neuralstride.bridge.transport import InProcessTransport
from neuralstride.core.processing import FrameProcessor
from neuralstride.monitoring.session import PostureSession
from neuralstride.monitoring.speech import Pyttsx3Backend, SpeechChannel
from neuralstride.monitoring.timer_manager import TickScheduler
from neuralstride.monitoring.voice_coach import VoiceCoach

configure_app_logging()
logger = logging.getLogger("neuralstride.web")

PLANT_EMOJIS = {
    'dormant': '🌰',
    'sprout': '🌿',
    'growing': '🌿',
    'flowering': '🌸',
    'bloom': '🌺',
    'wilting': '🥀',
}

STATUS_MESSAGES = {
    'dormant': 'Not Monitoring',
    'sprout': 'Growing Well',
    'growing': 'Healthy Growth',
    'flowering': 'Blooming Nicely!',
    'bloom': 'Perfect Health! 🎉',
    'wilting': 'Needs Attention!',
}


@st.cache_resource
def get_background() -> LockedBackground:
    background = LockedBackground(BackgroundContext(scheduler=TickScheduler()))
    background.context.on_install()
    return background


@st.cache_resource
def get_speech_backend():
    try:
        return Pyttsx3Backend()
    except Exception as e:
        logger.warning("Speech unavailable, continuing without voice: %s", e)
        return None


class _VideoProcessor(VideoProcessorBase):
    def __init__(self):
        background = get_background()
        self.voice_enabled = True
        self.session = PostureSession(
            coach=VoiceCoach(SpeechChannel(get_speech_backend())),
            bridge=ExtensionBridge(InProcessTransport(background.handle_external_message)),
            scheduler=TickScheduler(),
        )
        # one landmarker per stream; VIDEO mode needs this stream's own timestamps
        self.frames = FrameProcessor()
        self.status = "starting"
        self.session.start()

    def recv(self, frame: av.VideoFrame) -> av.VideoFrame:
        image = frame.to_ndarray(format="bgr24")
        timestamp_ms = int(time.monotonic() * 1000)
        annotated, landmarks, _metrics, self.status = self.frames.process(image, timestamp_ms)
        self.session.coach.enabled = self.voice_enabled
        self.session.process_landmarks(landmarks, self.status)
        self.session.run_pending()
        return av.VideoFrame.from_ndarray(annotated, format="bgr24")

    def on_ended(self):
        self.session.stop()
        self.frames.release()


st.set_page_config(page_title="NeuralStride", page_icon="🌱", layout="wide")
st.title("NeuralStride")
st.caption("Posture coaching with a posture plant. Runs locally.")

background = get_background()
background.tick()

with st.sidebar:
    st.markdown("### 🌱 Posture Plant")
    status = background.handle_message(messages.get_status())
    state = status["plantState"]
    st.markdown(f"<div style='font-size:64px;text-align:center'>{PLANT_EMOJIS.get(state, '🌱')}</div>",
                unsafe_allow_html=True)
    st.markdown(f"**{STATUS_MESSAGES.get(state, 'Your Posture Plant')}**")
    st.metric("Score", round(status["currentScore"]))
    st.progress(min(100, max(0, int(status["currentScore"]))) / 100)

    if status["isMonitoring"]:
        if st.button("Stop Monitoring", use_container_width=True):
            background.handle_message(messages.stop_monitoring())
            st.rerun()
    elif st.button("Start Monitoring", use_container_width=True):
        background.handle_message(messages.start_monitoring())
        st.rerun()

    voice_enabled = st.checkbox("🔊 Voice coach", value=True)
    stats = background.stats()
    st.markdown(f"Sessions: **{stats.get('totalSessions', 0)}** · Best score: **{stats.get('bestScore', 0)}**")

ctx = webrtc_streamer(
    key="neuralstride",
    mode=WebRtcMode.SENDRECV,
    video_processor_factory=_VideoProcessor,
    media_stream_constraints={"video": {"width": 1280, "height": 720}, "audio": False},
    async_processing=True,
)

if ctx.video_processor:
    ctx.video_processor.voice_enabled = voice_enabled
    processor = ctx.video_processor
    if processor.session.error:
        st.error(processor.session.error)
        if processor.frames.error:
            st.caption(processor.frames.error)

    metrics = processor.session.metrics
    plant = processor.session.plant_state
    col_score, col_angle, col_plant = st.columns(3)
    if metrics.is_person_detected:
        col_score.metric("Posture Score", f"{metrics.posture_score}/100")
        col_angle.metric("Cervical Angle", f"{metrics.cervical_angle}°", help="Ideal: 165-180°")
    else:
        col_score.metric("Posture Score", "No Person")
    col_plant.metric("Plant", f"Stage {plant.stage}", f"{plant.health:.0f} health")
