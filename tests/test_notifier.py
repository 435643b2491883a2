"""Tests for platform notification helpers."""

import io

import utils.notifier as notifier


class TestBuildNotificationCommand:
    def test_macos_escapes_quotes(self, monkeypatch):
        monkeypatch.setattr(notifier.platform, "system", lambda: "Darwin")

        command = notifier.build_notification_command('say "hi"', "● p: done")

        assert command[:2] == ["osascript", "-e"]
        assert 'display notification "say \\"hi\\""' in command[2]
        assert 'with title "● p: done"' in command[2]

    def test_linux_uses_notify_send(self, monkeypatch):
        monkeypatch.setattr(notifier.platform, "system", lambda: "Linux")
        monkeypatch.setattr(notifier.shutil, "which", lambda name: "/usr/bin/notify-send")

        assert notifier.build_notification_command("msg", "title") == [
            "/usr/bin/notify-send",
            "title",
            "msg",
        ]

    def test_linux_without_notify_send(self, monkeypatch):
        monkeypatch.setattr(notifier.platform, "system", lambda: "Linux")
        monkeypatch.setattr(notifier.shutil, "which", lambda name: None)

        assert notifier.build_notification_command("msg", "title") is None
        assert notifier.send_notification("msg", "title") is False


class TestFocusAndTitle:
    def test_non_macos_is_never_focused(self, monkeypatch):
        monkeypatch.setattr(notifier.platform, "system", lambda: "Linux")
        assert notifier.is_terminal_focused() is False

    def test_set_tab_title_writes_osc(self):
        stream = io.StringIO()

        notifier.set_tab_title("● proj: done", stream)

        assert stream.getvalue() == "\x1b]0;● proj: done\x07"
