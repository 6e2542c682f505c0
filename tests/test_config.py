"""Tests for configuration loading and validation."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from leadtime.config import DEFAULT_API_URL, load_config
from leadtime.errors import AuthenticationError, ConfigurationError


def test_load_config_reads_token_from_environment(monkeypatch):
    """Verify the token falls back to GITHUB_TOKEN and units are normalized."""
    monkeypatch.setenv("GITHUB_TOKEN", " env-token ")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)

    config = load_config(organization="org", team_slugs=["core", "web", "core"], unit="months", value=3)

    assert config.token == "env-token"
    assert config.team_slugs == ("core", "web")
    assert config.unit == "month"
    assert config.api_url == DEFAULT_API_URL


def test_load_config_prefers_explicit_token_and_custom_api_url(monkeypatch):
    """Verify an explicit token wins and GITHUB_API_URL targets an enterprise host."""
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")

    config = load_config(organization="org", team_slugs=["core"], unit="week", value=2, token="cli-token")

    assert config.token == "cli-token"
    assert config.api_url == "https://ghe.example.com/api/v3"


def test_load_config_reports_every_missing_field():
    """Verify each invalid field contributes its own user-facing message."""
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(organization=" ", team_slugs=[], unit="fortnights", value=0, token="t")

    problems = excinfo.value.problems
    assert "Organization name is required." in problems
    assert "At least one team slug is required." in problems
    assert any("'unit'" in problem for problem in problems)
    assert any("'value'" in problem for problem in problems)


def test_load_config_missing_token_raises_authentication_error(monkeypatch):
    """Verify a blank credential is rejected before any network activity."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    with pytest.raises(AuthenticationError):
        load_config(organization="org", team_slugs=["core"], unit="month", value=1)
