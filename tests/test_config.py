"""Tests for AclConfig."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from aclcore import AclConfig, ConfigurationError, LogLevel, load_config_from_env


class TestAclConfig:
    """Tests for AclConfig model."""

    def test_create_default_config(self) -> None:
        """Test that only the zone is required and base dirs derive from it."""
        config = AclConfig(zone="tempZone")
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.service_name is None
        assert config.home == "/tempZone/home"
        assert config.trash_base == "/tempZone/trash/home"
        assert config.admin_users == []
        assert config.max_path_length == 1067
        assert config.max_dir_length == 640

    def test_create_custom_config(self) -> None:
        """Test creating an AclConfig with custom values."""
        config = AclConfig(
            log_level=LogLevel.DEBUG,
            log_json=True,
            service_name="acl-worker",
            zone="labZone",
            home="/labZone/users/",
            trash_base="/labZone/bin",
            admin_users=["rods", "admin"],
            max_path_length=512,
            max_dir_length=256,
        )
        assert config.log_level == LogLevel.DEBUG
        assert config.log_json is True
        assert config.service_name == "acl-worker"
        assert config.home == "/labZone/users"
        assert config.trash_base == "/labZone/bin"
        assert config.admin_users == ["rods", "admin"]
        assert config.max_path_length == 512
        assert config.max_dir_length == 256

    def test_zone_required(self) -> None:
        """Test that a config without zone is rejected."""
        with pytest.raises(ValueError):
            AclConfig()  # type: ignore[call-arg]

    @pytest.mark.parametrize("zone", ["", "   ", "temp/Zone"])
    def test_zone_invalid(self, zone: str) -> None:
        with pytest.raises(ValueError, match="Zone must be"):
            AclConfig(zone=zone)

    def test_relative_base_dir_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be absolute"):
            AclConfig(zone="tempZone", home="tempZone/home")

    def test_log_level_from_string(self) -> None:
        """Test creating config with log level as lowercase string."""
        config = AclConfig(zone="tempZone", log_level="debug")
        assert config.log_level == LogLevel.DEBUG

    def test_log_level_invalid(self) -> None:
        """Test creating config with invalid log level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            AclConfig(zone="tempZone", log_level="INVALID")

    def test_dir_limit_must_be_below_path_limit(self) -> None:
        with pytest.raises(ValueError, match="max_dir_length"):
            AclConfig(zone="tempZone", max_path_length=100, max_dir_length=100)

    def test_extra_fields_forbidden(self) -> None:
        """Test that extra fields are forbidden."""
        with pytest.raises(Exception):  # Pydantic validation error
            AclConfig(zone="tempZone", redis_url="redis://localhost")  # type: ignore[call-arg]


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    @patch.dict(os.environ, {}, clear=True)
    def test_zone_missing(self) -> None:
        """Test that a missing ACL_ZONE is a configuration error."""
        with pytest.raises(ConfigurationError, match="ACL_ZONE"):
            load_config_from_env()

    @patch.dict(os.environ, {"ACL_ZONE": "tempZone"}, clear=True)
    def test_load_defaults(self) -> None:
        """Test loading config with only the zone set."""
        config = load_config_from_env()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.home == "/tempZone/home"
        assert config.admin_users == []

    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "WARNING",
            "LOG_JSON": "yes",
            "SERVICE_NAME": "acl-worker",
            "ACL_ZONE": "labZone",
            "ACL_HOME": "/labZone/users",
            "ACL_TRASH_BASE": "/labZone/bin",
            "ACL_ADMIN_USERS": "rods, admin ,,",
            "ACL_MAX_PATH_LENGTH": "2048",
            "ACL_MAX_DIR_LENGTH": "1024",
        },
        clear=True,
    )
    def test_load_from_env(self) -> None:
        """Test loading config from environment variables."""
        config = load_config_from_env()
        assert config.log_level == LogLevel.WARNING
        assert config.log_json is True
        assert config.service_name == "acl-worker"
        assert config.zone == "labZone"
        assert config.home == "/labZone/users"
        assert config.trash_base == "/labZone/bin"
        assert config.admin_users == ["rods", "admin"]
        assert config.max_path_length == 2048
        assert config.max_dir_length == 1024

    @patch.dict(os.environ, {"ACL_ZONE": "tempZone", "ACL_MAX_PATH_LENGTH": "lots"}, clear=True)
    def test_invalid_number(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config_from_env()

    @patch.dict(os.environ, {"ACL_ZONE": "tempZone", "LOG_LEVEL": "LOUD"}, clear=True)
    def test_invalid_log_level_wrapped(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_env()
        assert exc_info.value.code == "CONFIGURATION_ERROR"
