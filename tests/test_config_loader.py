"""
Unit tests for config_loader module.

Tests the dynamic configuration loading functionality including:
- Loading provider-specific configurations
- Validation of configuration modules
- Error handling for missing or unsupported providers
"""

import pytest
from deployunit.config_loader import (
    PROVIDER_CONFIG_MODULES,
    check_provider,
    list_available_providers,
    load_config,
    validate_config_module,
)
from deployunit.exceptions import ConfigurationError, UnsupportedProviderError


class TestCheckProvider:
    """Tests for check_provider() function."""

    def test_normalises_case_and_whitespace(self):
        assert check_provider(" AWS ") == "aws"
        assert check_provider("Gcp") == "gcp"

    @pytest.mark.parametrize("provider", ["oracle", "", None])
    def test_unknown_provider_raises_error(self, provider):
        with pytest.raises(UnsupportedProviderError) as exc_info:
            check_provider(provider)

        assert "not supported" in str(exc_info.value)


class TestLoadConfig:
    """Tests for load_config() function."""

    def test_load_aws_config(self):
        """Test loading AWS configuration."""
        config = load_config("aws")

        assert config.PROVIDER_NAME == "AWS"
        assert config.TERRAFORM_PROVIDER == "hashicorp/aws"
        assert config.AWS_SERVICE in config.RESOURCE_TYPES
        assert config.OPTION_NAMES["name"] == "app_name"

    def test_load_azure_config(self):
        """Test loading Azure configuration."""
        config = load_config("azure")

        assert config.PROVIDER_NAME == "Azure"
        assert config.PROVIDER_BLOCK == {"features": {}}
        assert config.OPTION_NAMES["name"] == "function_name"
        assert config.OPTION_NAMES["min_instances"] == "min_replicas"

    def test_load_gcp_config(self):
        """Test loading GCP configuration."""
        config = load_config("gcp")

        assert config.PROVIDER_NAME == "GCP"
        assert config.GCP_SERVICE == "google_cloud_run_v2_service"
        assert config.OPTION_NAMES["environment"] == "env_vars"

    def test_load_unsupported_provider_raises_error(self):
        """Test that loading unsupported provider raises UnsupportedProviderError."""
        with pytest.raises(UnsupportedProviderError) as exc_info:
            load_config("alibaba")

        assert "not supported" in str(exc_info.value)

    def test_config_is_cached(self):
        """Test that configuration modules are cached after first import."""
        config1 = load_config("aws")
        config2 = load_config("AWS")

        # Same module object (Python's import cache)
        assert config1 is config2


class TestValidateConfigModule:
    """Tests for validate_config_module() function."""

    @pytest.mark.parametrize("provider", sorted(PROVIDER_CONFIG_MODULES))
    def test_validate_shipped_configs(self, provider):
        assert validate_config_module(load_config(provider), provider) is True

    def test_validate_incomplete_config_raises_error(self):
        """Test that incomplete config module fails validation."""

        class IncompleteConfig:
            PROVIDER_NAME = "Test"
            # Missing PROVIDER_PREFIX, RESOURCE_TYPES, OPTION_NAMES

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config_module(IncompleteConfig, "test")

        assert "missing required attributes" in str(exc_info.value)


class TestListAvailableProviders:
    """Tests for list_available_providers() function."""

    def test_all_providers_available(self):
        assert list_available_providers() == ["aws", "gcp", "azure"]


class TestOptionNames:
    """Every provider spells the same invocation concepts."""

    def test_option_name_keys_match(self):
        keys = {
            provider: set(load_config(provider).OPTION_NAMES)
            for provider in PROVIDER_CONFIG_MODULES
        }
        assert keys["aws"] == keys["gcp"] == keys["azure"]
