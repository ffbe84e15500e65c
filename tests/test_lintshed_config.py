# SPDX-License-Identifier: MIT
"""Tests for lintshed.config — settings and run-mode resolution."""

from __future__ import annotations

import pytest

from lintshed.config import (
    DEFAULT_ENABLED_PLUGINS,
    Settings,
    load_settings,
    parse_bool,
    resolve_type_aware,
)

_ENV_VARS = (
    "LINTSHED_OXLINT_CMD",
    "LINTSHED_ESLINT_CMD",
    "LINTSHED_NODE",
    "LINTSHED_DEFAULT_PLUGINS",
    "LINTSHED_TYPE_AWARE_SOURCE",
    "LINTSHED_TIMEOUT",
    "LINTSHED_RESOLVER",
    "LINTSHED_TYPE_AWARE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings()
        assert settings == Settings()
        assert settings.oxlint_command == ("pnpm", "exec", "oxlint")
        assert settings.default_enabled_plugins == DEFAULT_ENABLED_PLUGINS
        assert settings.resolver == "eslint"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINTSHED_OXLINT_CMD", "npx --yes oxlint")
        monkeypatch.setenv("LINTSHED_ESLINT_CMD", "./node_modules/.bin/eslint")
        monkeypatch.setenv("LINTSHED_NODE", "/usr/local/bin/node")
        monkeypatch.setenv("LINTSHED_DEFAULT_PLUGINS", "typescript, react ,")
        monkeypatch.setenv("LINTSHED_TYPE_AWARE_SOURCE", "https://example.test/rules.txt")
        monkeypatch.setenv("LINTSHED_TIMEOUT", "12.5")
        monkeypatch.setenv("LINTSHED_RESOLVER", "local")
        settings = load_settings()
        assert settings.oxlint_command == ("npx", "--yes", "oxlint")
        assert settings.eslint_command == ("./node_modules/.bin/eslint",)
        assert settings.node_command == "/usr/local/bin/node"
        assert settings.default_enabled_plugins == ("typescript", "react")
        assert settings.type_aware_source == "https://example.test/rules.txt"
        assert settings.timeout == 12.5
        assert settings.resolver == "local"

    def test_cli_resolver_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINTSHED_RESOLVER", "local")
        assert load_settings(cli_resolver="eslint").resolver == "eslint"

    def test_unknown_resolver(self) -> None:
        with pytest.raises(ValueError, match="Unknown resolver"):
            load_settings(cli_resolver="flat")

    def test_bad_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINTSHED_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="LINTSHED_TIMEOUT"):
            load_settings()


class TestTypeAwareMode:
    def test_required(self) -> None:
        with pytest.raises(ValueError, match="type-aware mode must be set"):
            resolve_type_aware()

    def test_cli_value(self) -> None:
        assert resolve_type_aware("true") is True
        assert resolve_type_aware("no") is False

    def test_env_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINTSHED_TYPE_AWARE", "1")
        assert resolve_type_aware() is True

    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINTSHED_TYPE_AWARE", "true")
        assert resolve_type_aware("false") is False

    def test_invalid_token(self) -> None:
        with pytest.raises(ValueError, match="Expected true/false"):
            resolve_type_aware("maybe")

    @pytest.mark.parametrize("token", ["TRUE", " yes ", "1"])
    def test_parse_bool_is_lenient_on_case(self, token: str) -> None:
        assert parse_bool(token) is True
