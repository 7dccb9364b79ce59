# tests/conftest.py
"""
Shared pytest fixtures for ai-router tests.
"""

from __future__ import annotations

import pytest

from ai_router.config import RouterConfig
from ai_router.constants import API_KEY_ENV_VARS, ENV_PRIORITY, ENV_TIMEOUT
from ai_router.models import CompletionRequest, ProviderConfig


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable RouterConfig.from_env() reads."""
    for env_vars in API_KEY_ENV_VARS.values():
        for var in env_vars:
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv(ENV_PRIORITY, raising=False)
    monkeypatch.delenv(ENV_TIMEOUT, raising=False)
    return monkeypatch


@pytest.fixture
def full_config():
    return RouterConfig(
        providers=[
            ProviderConfig(name="anthropic", api_key="sk-ant-test"),
            ProviderConfig(name="openai", api_key="sk-test-openai"),
            ProviderConfig(name="gemini", api_key="gm-test"),
        ],
    )


@pytest.fixture
def hello_request():
    return CompletionRequest(prompt="Hello")
