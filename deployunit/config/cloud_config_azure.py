# Azure Cloud Configuration for terraunit
# Provider: Microsoft Azure (azurerm provider)
# Lowering: Log Analytics > Managed Identity > Container App Environment > Container App

# Provider metadata
PROVIDER_NAME = "Azure"
PROVIDER_PREFIX = ["azurerm_"]
TERRAFORM_PROVIDER = "hashicorp/azurerm"
TERRAFORM_PROVIDER_NAME = "azurerm"
# azurerm refuses to initialise without an (empty) features block
PROVIDER_BLOCK = {"features": {}}
DEFAULT_REGION = "eastus"

# Resource types emitted by the translator, in lowering order
AZURE_LOG_WORKSPACE = "azurerm_log_analytics_workspace"
AZURE_IDENTITY = "azurerm_user_assigned_identity"
AZURE_ENVIRONMENT = "azurerm_container_app_environment"
AZURE_APP = "azurerm_container_app"

RESOURCE_TYPES = [
    AZURE_LOG_WORKSPACE,
    AZURE_IDENTITY,
    AZURE_ENVIRONMENT,
    AZURE_APP,
]

# Defaults
DEFAULT_RESOURCE_GROUP = "rg-terraunit"
LOG_RETENTION_DAYS = 30
LOG_SKU = "PerGB2018"
REVISION_MODE = "Single"
IDENTITY_TYPE = "UserAssigned"

# Module invocation option names (concept -> option)
OPTION_NAMES = {
    "name": "function_name",
    "min_instances": "min_replicas",
    "max_instances": "max_replicas",
    "environment": "environment",
    "network_id": "virtual_network_id",
    "subnet_ids": "subnet_ids",
}
