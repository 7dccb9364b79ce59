# tests/test_config.py
"""
Unit tests for RouterConfig construction and validation.
"""

import pytest
from pydantic import ValidationError

from ai_router.config import RouterConfig
from ai_router.models import ProviderConfig


class TestFromEnv:
    def test_reads_one_key_per_provider(self, clean_env):
        clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant")
        clean_env.setenv("OPENAI_API_KEY", "sk-openai")
        config = RouterConfig.from_env()
        assert config.provider("anthropic").api_key == "sk-ant"
        assert config.provider("openai").api_key == "sk-openai"
        assert not config.provider("gemini").is_configured

    def test_every_provider_is_listed(self, clean_env):
        config = RouterConfig.from_env()
        assert sorted(p.name for p in config.providers) == ["anthropic", "gemini", "openai"]
        assert not any(p.is_configured for p in config.providers)

    @pytest.mark.parametrize(
        "var",
        ["GEMINI_API_KEY", "GOOGLE_API_KEY", "VITE_GEMINI_API_KEY", "NEXT_PUBLIC_GEMINI_API_KEY"],
    )
    def test_gemini_key_aliases(self, clean_env, var):
        clean_env.setenv(var, "gm-key")
        assert RouterConfig.from_env().provider("gemini").api_key == "gm-key"

    def test_gemini_alias_order(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "google")
        clean_env.setenv("GEMINI_API_KEY", "gemini")
        assert RouterConfig.from_env().provider("gemini").api_key == "gemini"

    def test_vite_key_configures_gemini(self, clean_env):
        clean_env.setenv("VITE_GEMINI_API_KEY", "gm-vite")
        clean_env.setenv("NEXT_PUBLIC_GEMINI_API_KEY", "gm-next")
        config = RouterConfig.from_env()
        assert config.provider("gemini").is_configured
        assert config.provider("gemini").api_key == "gm-vite"

    def test_blank_key_is_not_configured(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "   ")
        assert not RouterConfig.from_env().provider("openai").is_configured

    def test_default_priority_and_timeout(self, clean_env):
        config = RouterConfig.from_env()
        assert config.priority == ["anthropic", "openai", "gemini"]
        assert config.request_timeout_seconds == 60.0

    def test_priority_and_timeout_overrides(self, clean_env):
        clean_env.setenv("AI_ROUTER_PRIORITY", "openai, gemini")
        clean_env.setenv("AI_ROUTER_TIMEOUT_SECONDS", "12.5")
        config = RouterConfig.from_env()
        assert config.priority == ["openai", "gemini"]
        assert config.request_timeout_seconds == 12.5

    def test_unknown_priority_entry_rejected(self, clean_env):
        clean_env.setenv("AI_ROUTER_PRIORITY", "openai,groq")
        with pytest.raises(ValidationError):
            RouterConfig.from_env()

    def test_kwargs_override_env(self, clean_env):
        config = RouterConfig.from_env(request_timeout_seconds=5)
        assert config.request_timeout_seconds == 5


class TestValidation:
    def test_duplicate_priority_rejected(self):
        with pytest.raises(ValidationError, match="must not repeat"):
            RouterConfig(priority=["openai", "openai"])

    def test_duplicate_provider_rejected(self):
        with pytest.raises(ValidationError, match="configured once"):
            RouterConfig(
                providers=[
                    ProviderConfig(name="openai", api_key="a"),
                    ProviderConfig(name="openai", api_key="b"),
                ]
            )

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            RouterConfig(request_timeout_seconds=0)

    def test_timeout_can_be_disabled(self):
        assert RouterConfig(request_timeout_seconds=None).request_timeout_seconds is None

    def test_config_is_frozen(self):
        config = RouterConfig()
        with pytest.raises(ValidationError):
            config.priority = ["openai"]

    def test_unknown_provider_placeholder(self):
        placeholder = RouterConfig().provider("gemini")
        assert placeholder.name == "gemini"
        assert placeholder.api_key is None
        assert not placeholder.is_configured

    def test_api_key_hidden_from_repr(self):
        assert "secret" not in repr(ProviderConfig(name="openai", api_key="secret"))


class TestFromYaml:
    def test_env_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_OPENAI_KEY", "sk-from-env")
        path = tmp_path / "ai_router.yaml"
        path.write_text(
            "providers:\n"
            "  - name: openai\n"
            '    api_key: "${TEST_OPENAI_KEY}"\n'
            "    model: gpt-4.1\n"
            "priority: [openai, anthropic]\n"
            "request_timeout_seconds: 30\n"
        )
        config = RouterConfig.from_yaml(str(path))
        assert config.provider("openai").api_key == "sk-from-env"
        assert config.provider("openai").model == "gpt-4.1"
        assert config.priority == ["openai", "anthropic"]
        assert config.request_timeout_seconds == 30

    def test_missing_env_var_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TEST_MISSING_KEY", raising=False)
        path = tmp_path / "ai_router.yaml"
        path.write_text('providers:\n  - name: openai\n    api_key: "${TEST_MISSING_KEY}"\n')
        with pytest.raises(EnvironmentError, match="TEST_MISSING_KEY"):
            RouterConfig.from_yaml(str(path))

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "ai_router.yaml"
        path.write_text("")
        config = RouterConfig.from_yaml(str(path))
        assert config.providers == []
        assert config.priority == ["anthropic", "openai", "gemini"]


class TestRouterFromConfig:
    def test_primary_follows_priority(self, full_config):
        from ai_router import AIRouter

        router = AIRouter(full_config)
        assert router.primary_provider() == "anthropic"
        assert [p.name for p in router.attempt_order("gemini")] == ["gemini", "anthropic", "openai"]

    def test_selector_on_shared_request(self, full_config, hello_request):
        from ai_router import AIRouter

        assert AIRouter(full_config).select_provider(hello_request) == "anthropic"
