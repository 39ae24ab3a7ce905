"""Shared test fixtures for the umbrella_mail test suite."""

from __future__ import annotations

import os

import pytest

from umbrella_mail.config import SessionConfig
from umbrella_mail.simple import SimpleEmail


@pytest.fixture(autouse=True)
def _clean_mail_env(monkeypatch):
    """Keep MAIL_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("MAIL_"):
            monkeypatch.delenv(key)


@pytest.fixture
def session_config() -> SessionConfig:
    return SessionConfig(host_name="smtp.example.com")


@pytest.fixture
def email() -> SimpleEmail:
    return SimpleEmail()


@pytest.fixture
def ready_email() -> SimpleEmail:
    """An email with everything needed for a successful build."""
    email = SimpleEmail()
    email.set_host_name("smtp.example.com")
    email.set_from("test@example.com")
    email.add_to("recipient@example.com")
    return email
