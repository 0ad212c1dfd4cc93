"""Tests for RotationSettings environment loading and validation."""

import pytest
from pydantic import ValidationError

from config.settings import RotationSettings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "AWS_REGION",
        "ROTATION_AWS_REGION",
        "ROTATION_AWS_ENDPOINT_URL",
        "ROTATION_NETWORK_TIMEOUT_SECONDS",
        "ROTATION_LOG_LEVEL",
        "ROTATION_SERVICE_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestRotationSettings:
    @pytest.mark.unit()
    def test_defaults(self) -> None:
        settings = RotationSettings(_env_file=None)

        assert settings.aws_region == "us-east-1"
        assert settings.aws_endpoint_url is None
        assert settings.network_timeout_seconds == 1.0
        assert settings.service_name == "secret_rotator"
        assert settings.log_level == "INFO"

    @pytest.mark.unit()
    def test_prefixed_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("ROTATION_NETWORK_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("ROTATION_AWS_ENDPOINT_URL", "http://localhost:4566")
        monkeypatch.setenv("ROTATION_LOG_LEVEL", "warning")

        settings = RotationSettings(_env_file=None)

        assert settings.network_timeout_seconds == 2.5
        assert settings.aws_endpoint_url == "http://localhost:4566"
        assert settings.log_level == "WARNING"

    @pytest.mark.unit()
    def test_standard_aws_region_variable(self, monkeypatch) -> None:
        monkeypatch.setenv("AWS_REGION", "eu-central-1")

        assert RotationSettings(_env_file=None).aws_region == "eu-central-1"

    @pytest.mark.unit()
    def test_prefixed_region_wins(self, monkeypatch) -> None:
        monkeypatch.setenv("AWS_REGION", "eu-central-1")
        monkeypatch.setenv("ROTATION_AWS_REGION", "us-west-2")

        assert RotationSettings(_env_file=None).aws_region == "us-west-2"

    @pytest.mark.unit()
    @pytest.mark.parametrize("timeout", [0, -1, 61])
    def test_timeout_bounds(self, timeout: float) -> None:
        with pytest.raises(ValidationError):
            RotationSettings(_env_file=None, network_timeout_seconds=timeout)

    @pytest.mark.unit()
    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            RotationSettings(_env_file=None, log_level="LOUD")

    @pytest.mark.unit()
    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
