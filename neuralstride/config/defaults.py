"""
Default configuration values for NeuralStride
"""
import os

# Score tiers used by the voice coach (hysteretic, tier changes only)
SCORING_SETTINGS = {
    'good_threshold': 75,
    'fair_threshold': 50,
    'critical_threshold': 35,  # scores below this count towards escalation
    'critical_streak': 5,  # consecutive critical samples before escalation
}

# Timing settings (seconds)
TIMING_SETTINGS = {
    'plant_tick_interval': 1.0,
    'drift_tick_interval': 6.0,  # chrome alarm period of 0.1 min
    'live_timeout': 10.0,  # silence before the background falls back to drift
    'break_reminder_interval': 1800,  # 30 minutes
}

# Plant simulation (foreground health stat)
PLANT_SETTINGS = {
    'initial_health': 50.0,
    'stage_breakpoints': (80, 60, 40, 20),
}

# Standalone drift simulation (background score random walk)
SIMULATION_SETTINGS = {
    'initial_score': 50,
    'max_step': 5.0,
    'wilting_threshold': 30,
}

# Voice coach settings
VOICE_SETTINGS = {
    'enabled': True,
    'voice': 'female',  # 'female' | 'male'
    'rate': 175,
    'volume': 0.9,
}

# Camera settings
CAMERA_SETTINGS = {
    'camera_id': 0,
    'width': 1280,
    'height': 720,
}

# MediaPipe model settings
MODEL_SETTINGS = {
    'model_path': os.getenv('NEURALSTRIDE_MODEL_PATH', './models/pose_landmarker_lite.task'),
    'min_pose_detection_confidence': 0.5,
    'min_pose_presence_confidence': 0.5,
    'min_tracking_confidence': 0.5,
}

# Spoken coaching messages
VOICE_MESSAGES = {
    'declining': "Your posture is declining. Sit up straighter.",
    'improving': "Better! Keep improving.",
    'needs_adjustment': "Your posture needs adjustment.",
    'excellent': "Excellent posture! Well done.",
    'critical': "Critical! Your posture needs immediate correction.",
    'session_start': (
        "Neural stride monitoring activated. "
        "I'll help you maintain healthy posture throughout your session."
    ),
    'session_end': (
        "Session complete. You worked for {minutes} minutes with an average "
        "posture score of {score}. Great effort!"
    ),
}

BREAK_REMINDERS = [
    "Time for a quick break. Stand up and stretch for 30 seconds.",
    "You've been working hard. Take a moment to stretch your neck and shoulders.",
    "Break time! Roll your shoulders back and take a deep breath.",
    "Let's take a neural reset. Stand up and move around for a bit.",
]

# (minimum average score, message), checked in order
ENCOURAGEMENT_MESSAGES = [
    (90, "Outstanding work today! Your posture has been excellent."),
    (75, "Great job maintaining good posture. Keep up the healthy habits."),
    (60, "You're doing well, but there's room for improvement. Stay mindful of your posture."),
]

# Notification alerts (title, message)
ALERT_MESSAGES = {
    'monitoring_started': ("NeuralStride Started", "Your posture plant is now monitoring"),
    'plant_wilting': ("Your Plant is Wilting", "Your posture is poor. Sit up straight"),
}

DETECTOR_ERROR_MESSAGE = "Failed to initialize pose detection. Check the model file and try again."

# Seed values written to the settings store on first start
DEFAULT_SETTINGS = {
    'voiceEnabled': True,
    'voiceType': 'female',
    'notifications': True,
    'autoStart': True,
    'updateInterval': 5,
}

DEFAULT_STATS = {
    'totalSessions': 0,
    'totalMinutes': 0,
    'bestScore': 0,
    'currentStreak': 0,
}
