"""
System notification module for NeuralStride.
Delivers alert-system events as native desktop notifications.
"""

import logging
import platform
import shutil
import subprocess
from typing import List, Optional

# notify-send's urgency levels; anything else is sent as "normal"
URGENCY_LEVELS = ("low", "normal", "critical")


def _escape_applescript(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class SystemNotifier:
    """notify-send on Linux, osascript on macOS, BurntToast via PowerShell on Windows"""

    TOOLS = {"Darwin": "osascript", "Linux": "notify-send", "Windows": "powershell"}

    def __init__(self, system: Optional[str] = None):
        self.system = system or platform.system()
        self.logger = logging.getLogger(__name__)
        self.available = self._check_requirements()

    def _check_requirements(self) -> bool:
        """Check if system has required notification tools"""
        tool = self.TOOLS.get(self.system)
        if tool is None or shutil.which(tool) is None:
            self.logger.info("Desktop notifications unavailable on %s", self.system)
            return False
        return True

    def build_command(self, title: str, message: str, urgency: str = "normal") -> Optional[List[str]]:
        if self.system == "Darwin":
            script = 'display notification "{}" with title "{}"'.format(
                _escape_applescript(message), _escape_applescript(title))
            return ["osascript", "-e", script]
        if self.system == "Linux":
            if urgency not in URGENCY_LEVELS:
                urgency = "normal"
            return ["notify-send", f"--urgency={urgency}", "--app-name=NeuralStride", title, message]
        if self.system == "Windows":
            title, message = title.replace('"', "'"), message.replace('"', "'")
            return ["powershell", "-command", f'New-BurntToastNotification -Text "{title}","{message}"']
        return None

    def notify(self, title: str, message: str, urgency: str = "normal") -> bool:
        """
        Send system notification
        Args:
            title: Notification title
            message: Notification message
            urgency: Priority level ("low", "normal", "critical")
        Returns:
            bool: True if notification was sent successfully
        """
        command = self.build_command(title, message, urgency) if self.available else None
        if command is None:
            return False

        try:
            subprocess.run(command, check=True, capture_output=True, timeout=5)
        except (subprocess.SubprocessError, OSError) as e:
            self.logger.debug("Notification failed: %s", e)
            return False
        return True
