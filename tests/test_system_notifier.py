import subprocess

from neuralstride.utils import system_notifier
from neuralstride.utils.system_notifier import SystemNotifier


def test_linux_command_clamps_urgency(monkeypatch):
    monkeypatch.setattr(system_notifier.shutil, "which", lambda tool: "/usr/bin/" + tool)
    notifier = SystemNotifier(system="Linux")
    assert notifier.build_command("Title", "Body", "urgent") == [
        "notify-send", "--urgency=normal", "--app-name=NeuralStride", "Title", "Body"]


def test_macos_command_escapes_quotes(monkeypatch):
    monkeypatch.setattr(system_notifier.shutil, "which", lambda tool: "/usr/bin/" + tool)
    command = SystemNotifier(system="Darwin").build_command('Say "hi"', "Sit up")
    assert command[2] == 'display notification "Sit up" with title "Say \\"hi\\""'


def test_missing_tool_reports_undelivered(monkeypatch):
    monkeypatch.setattr(system_notifier.shutil, "which", lambda tool: None)
    assert SystemNotifier(system="Linux").notify("Title", "Body") is False


def test_failing_command_reports_undelivered(monkeypatch):
    def boom(*args, **kwargs):
        raise subprocess.CalledProcessError(1, args[0])

    monkeypatch.setattr(system_notifier.shutil, "which", lambda tool: "/usr/bin/" + tool)
    monkeypatch.setattr(system_notifier.subprocess, "run", boom)
    assert SystemNotifier(system="Linux").notify("Title", "Body") is False


def test_unsupported_platform():
    notifier = SystemNotifier(system="Plan9")
    assert notifier.available is False
    assert notifier.build_command("Title", "Body") is None
