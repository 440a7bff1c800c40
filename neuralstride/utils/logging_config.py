"""
Logging configuration for NeuralStride.
Silences the pose model's framework noise and sets up the app's own loggers.
"""

import logging
import os
import warnings

DEBUG = os.getenv("NEURALSTRIDE_DEBUG", "0") in ("1", "true", "True")

LOGGERS_TO_DISABLE = [
    'mediapipe',
    'mediapipe.python',
    'tensorflow',
    'absl',
    'PIL',
    'streamlit',
    'aioice',
    'aiortc',
    'comtypes',
]


def configure_silent_logging():
    # Suppress all warnings
    warnings.filterwarnings('ignore')

    for logger_name in LOGGERS_TO_DISABLE:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.CRITICAL)
        logger.propagate = False

    # Environment variables for C++ logs
    os.environ.setdefault("GLOG_minloglevel", "3")
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "3")

    # Disable absl logging
    try:
        import absl.logging
        absl.logging.set_verbosity(absl.logging.FATAL)
        absl.logging.use_absl_handler()
    except ImportError:
        pass


def configure_app_logging(level=None):
    """Route neuralstride.* loggers to stderr at the configured level."""
    if level is None:
        level = "DEBUG" if DEBUG else os.getenv("NEURALSTRIDE_LOG_LEVEL", "INFO")

    app_logger = logging.getLogger("neuralstride")
    app_logger.setLevel(level)
    if not app_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s", "%H:%M:%S"))
        app_logger.addHandler(handler)
    app_logger.propagate = False
    return app_logger
