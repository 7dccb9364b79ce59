# ai_router/config.py
"""
RouterConfig: the resolved, read-only configuration of the router.

Supports construction from:
  - Python dict   → RouterConfig.from_dict(data)
  - YAML file     → RouterConfig.from_yaml("ai_router.yaml")
  - Environment   → RouterConfig.from_env()
"""

from __future__ import annotations

import os
import re
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator

from .constants import (
    API_KEY_ENV_VARS,
    DEFAULT_PRIORITY,
    ENV_PRIORITY,
    ENV_TIMEOUT,
    REQUEST_TIMEOUT_SECONDS,
)
from .models import ProviderConfig, ProviderName


class RouterConfig(BaseModel):
    """
    Top-level configuration for the AI router.

    Instantiate directly or use one of the factory class methods:
      RouterConfig.from_dict(data)
      RouterConfig.from_yaml(path)
      RouterConfig.from_env()
    """

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    providers: list[ProviderConfig] = Field(default_factory=list)
    priority: list[ProviderName] = Field(
        default_factory=lambda: list(DEFAULT_PRIORITY),
        description="Global fallback order. Tried after the selected provider.",
    )
    request_timeout_seconds: float | None = Field(
        default=REQUEST_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for a single adapter call, or a single stream chunk. None disables it.",
    )
    on_route: Callable | None = Field(
        default=None,
        description="Optional async callback fired after every successful completion. Receives a RouteEvent.",
        exclude=True,
    )

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError(f"priority must not repeat a provider, got {v}")
        return v

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, v: list[ProviderConfig]) -> list[ProviderConfig]:
        names = [p.name for p in v]
        if len(set(names)) != len(names):
            raise ValueError(f"each provider may be configured once, got {names}")
        return v

    def provider(self, name: str) -> ProviderConfig:
        """Return the config for *name*, or an unconfigured placeholder."""
        for p in self.providers:
            if p.name == name:
                return p
        return ProviderConfig(name=name)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> "RouterConfig":
        """Build config from a plain Python dictionary."""
        merged = {**data, **kwargs}
        return cls.model_validate(merged)

    @classmethod
    def from_yaml(cls, path: str, **kwargs: Any) -> "RouterConfig":
        """
        Build config from a YAML file.

        Environment variable interpolation is supported:
          api_key: "${OPENAI_API_KEY}"
        """
        try:
            import yaml  # type: ignore[import]
        except ImportError as exc:
            raise ImportError(
                "PyYAML is required for from_yaml(). Install it with: pip install pyyaml"
            ) from exc

        with open(path) as f:
            raw = f.read()

        def _replace(match: re.Match) -> str:  # type: ignore[type-arg]
            var = match.group(1)
            value = os.environ.get(var)
            if value is None:
                raise EnvironmentError(
                    f"Environment variable '{var}' referenced in '{path}' is not set."
                )
            return value

        raw = re.sub(r"\$\{([^}]+)\}", _replace, raw)
        data = yaml.safe_load(raw) or {}
        return cls.from_dict(data, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "RouterConfig":
        """
        Build config from environment variables.

        Reads one API key per provider family:
          ANTHROPIC_API_KEY → anthropic
          OPENAI_API_KEY    → openai
          GEMINI_API_KEY    → gemini (GOOGLE_API_KEY, VITE_GEMINI_API_KEY
                              and NEXT_PUBLIC_GEMINI_API_KEY are
                              accepted too, in that order)

        Optional overrides:
          AI_ROUTER_PRIORITY        → priority, e.g. "openai,anthropic,gemini"
          AI_ROUTER_TIMEOUT_SECONDS → request_timeout_seconds
        """
        providers: list[dict[str, Any]] = []
        for name, env_vars in API_KEY_ENV_VARS.items():
            api_key = next((os.environ[v] for v in env_vars if os.environ.get(v)), None)
            providers.append({"name": name, "api_key": api_key})

        data: dict[str, Any] = {"providers": providers}

        priority = os.environ.get(ENV_PRIORITY)
        if priority:
            data["priority"] = [p.strip() for p in priority.split(",") if p.strip()]

        timeout = os.environ.get(ENV_TIMEOUT)
        if timeout:
            data["request_timeout_seconds"] = float(timeout)

        data.update(kwargs)
        return cls.from_dict(data)
