import dataclasses

import pytest

import main
from santa.core.config import Settings
from santa.notify.base import Notifier, NotifyError

SANTA_FILE = """Secret Santa
%1, you are buying for %3

42

A:a@example.com
B:b@example.com
C:c@example.com
D:d@example.com
"""


class RecordingNotifier(Notifier):
    def __init__(self, template, fail=False):
        super().__init__(template)
        self.fail = fail
        self.sent = []
        self.closed = False

    async def send(self, source, destination):
        if self.fail:
            raise NotifyError("mailbox unavailable")
        self.sent.append((source.name, destination.name))

    async def close(self):
        self.closed = True


def make_settings(santa_file, **overrides):
    settings = Settings(
        santa_file=str(santa_file),
        notifier="log",
        bot_token=None,
        smtp_host=None,
        smtp_port=587,
        smtp_username=None,
        smtp_password=None,
        smtp_from=None,
        smtp_starttls=True,
        dry_run=False,
        dry_run_address=None,
        send_concurrency=2,
        retry_delay=0.0,
        max_send_attempts=None,
        assume_yes=False,
        database_url=None,
        log_level="INFO",
        log_path="unused.log",
    )
    return dataclasses.replace(settings, **overrides)


@pytest.fixture
def santa_file(tmp_path):
    path = tmp_path / "santa.txt"
    path.write_text(SANTA_FILE, encoding="utf-8")
    return path


@pytest.fixture
def run(monkeypatch):
    notifiers = []

    def build(settings, template):
        notifier = RecordingNotifier(template, fail=settings.max_send_attempts is not None)
        notifiers.append(notifier)
        return notifier

    def run_main(settings):
        monkeypatch.setattr(main, "load_settings", lambda: settings)
        monkeypatch.setattr(main, "setup_logging", lambda level, path: None)
        monkeypatch.setattr(main, "build_notifier", build)
        return main.main(), notifiers

    return run_main


def refuse_prompt(prompt=""):
    raise AssertionError("the confirmation prompt should not be shown")


def test_dry_run_skips_confirmation(run, santa_file, monkeypatch):
    monkeypatch.setattr("builtins.input", refuse_prompt)
    status, notifiers = run(make_settings(santa_file, dry_run=True))

    assert status == 0
    assert len(notifiers[0].sent) == 4
    assert notifiers[0].closed


def test_assume_yes_skips_confirmation(run, santa_file, monkeypatch):
    monkeypatch.setattr("builtins.input", refuse_prompt)
    status, notifiers = run(make_settings(santa_file, assume_yes=True))

    assert status == 0
    assert sorted(giver for giver, _ in notifiers[0].sent) == ["A", "B", "C", "D"]


def test_enter_at_prompt_sends(run, santa_file, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt="": "")
    status, notifiers = run(make_settings(santa_file))

    assert status == 0
    assert len(notifiers[0].sent) == 4
    assert "WARNING" in capsys.readouterr().out


@pytest.mark.parametrize("interrupt", [EOFError, KeyboardInterrupt])
def test_cancel_at_prompt_sends_nothing(run, santa_file, monkeypatch, interrupt):
    def cancel(prompt=""):
        raise interrupt

    monkeypatch.setattr("builtins.input", cancel)
    status, notifiers = run(make_settings(santa_file))

    assert status == 1
    assert notifiers == []


def test_infeasible_file_fails_before_prompt(run, tmp_path, monkeypatch):
    path = tmp_path / "santa.txt"
    path.write_text("Subject\nBody\n\n1\n\nA:a\nB:b\n\nA,B\n", encoding="utf-8")
    monkeypatch.setattr("builtins.input", refuse_prompt)
    status, notifiers = run(make_settings(path))

    assert status == 1
    assert notifiers == []


def test_invalid_file_fails_before_prompt(run, tmp_path, monkeypatch):
    path = tmp_path / "santa.txt"
    path.write_text("Subject\nBody\n\nnot-a-seed\n\nA:a\nB:b\n", encoding="utf-8")
    monkeypatch.setattr("builtins.input", refuse_prompt)
    status, notifiers = run(make_settings(path))

    assert status == 1
    assert notifiers == []


def test_missing_file_fails_before_prompt(run, tmp_path, monkeypatch):
    monkeypatch.setattr("builtins.input", refuse_prompt)
    status, notifiers = run(make_settings(tmp_path / "missing.txt"))

    assert status == 1
    assert notifiers == []


def test_dead_letters_give_non_zero_status(run, santa_file):
    status, notifiers = run(make_settings(santa_file, assume_yes=True, max_send_attempts=2))

    assert status == 1
    assert notifiers[0].sent == []
    assert notifiers[0].closed
