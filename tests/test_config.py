import pytest
from pydantic import ValidationError

from clerk_node.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.setenv("CLERK_SECRET_KEY", "sk_test")
    settings = Settings(_env_file=None)

    config = settings.verification_config()
    assert config.secret == ""
    assert config.tolerance_seconds == 300
    assert config.skip_verification is False
    assert config.selected_event_types == frozenset()


def test_event_selection_from_env(monkeypatch):
    monkeypatch.setenv("CLERK_SECRET_KEY", "sk_test")
    monkeypatch.setenv("CLERK_WEBHOOK_SECRET", "whsec_abc")
    monkeypatch.setenv("WEBHOOK_EVENTS", '["user.created", "user.deleted"]')
    monkeypatch.setenv("WEBHOOK_TOLERANCE_SECONDS", "0")

    config = Settings(_env_file=None).verification_config()

    assert config.secret == "whsec_abc"
    assert config.tolerance_seconds == 0
    assert config.selected_event_types == {"user.created", "user.deleted"}


def test_negative_tolerance_rejected(monkeypatch):
    monkeypatch.setenv("CLERK_SECRET_KEY", "sk_test")
    monkeypatch.setenv("WEBHOOK_TOLERANCE_SECONDS", "-1")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
