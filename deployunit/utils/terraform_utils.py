"""Terraform-specific utility functions for terraunit.

This module provides utilities for working with Terraform variables and
variable files used as module invocation inputs.
"""

import json
import os
from contextlib import suppress
from pathlib import Path
from typing import Any, Dict

import hcl2

from deployunit.exceptions import UnitFileError


def getvar(
    variable_name: str, all_variables_dict: Dict[str, Any], default: Any = None
) -> Any:
    """Retrieve a Terraform variable value from a dictionary or environment.

    Explicit values win; a ``TF_VAR_<name>`` environment variable is used
    when the dictionary has no entry, matching how Terraform itself resolves
    module inputs.

    Args:
        variable_name: Name of the variable (without leading ``var.`` prefix)
        all_variables_dict: Dictionary containing supplied variables
        default: Value returned when the variable cannot be resolved

    Returns:
        Resolved variable value or ``default`` when not found.
    """
    if not variable_name:
        return default

    if variable_name in all_variables_dict:
        return all_variables_dict[variable_name]
    for key in all_variables_dict:
        if key.lower() == variable_name.lower():
            return all_variables_dict[key]

    env_var = os.getenv(f"TF_VAR_{variable_name}")
    if env_var is not None:
        return _decode_env_value(env_var)

    return default


def _decode_env_value(raw: str) -> Any:
    # Terraform accepts HCL/JSON literals for complex TF_VAR_ values
    if raw[:1] in ("{", "[") or raw in ("true", "false") or raw.lstrip("-").isdigit():
        with suppress(json.JSONDecodeError):
            return json.loads(raw)
    return raw


def tfvar_read(filepath: str) -> Dict[str, Any]:
    """Read and parse a Terraform variable file (.tfvars).

    Args:
        filepath: Path to .tfvars file (HCL or JSON format)

    Returns:
        dict: Parsed variable definitions

    Raises:
        UnitFileError: If file does not exist or cannot be parsed
    """
    if not Path(filepath).exists():
        raise UnitFileError(
            f"Variable file not found: {filepath}", context={"filepath": filepath}
        )

    # Try parsing as JSON first
    with suppress(json.JSONDecodeError, UnicodeDecodeError):
        with open(filepath, "r") as f:
            return json.load(f)

    try:
        with open(filepath, "r") as f:
            parsed_data = hcl2.load(f)
    except Exception as e:
        raise UnitFileError(
            f"Failed to parse variable file: {filepath}",
            context={"error": str(e), "filepath": filepath},
        ) from e

    # HCL2 parser may wrap single values in lists - flatten them
    return {
        k: v[0] if isinstance(v, list) and len(v) == 1 and isinstance(v[0], dict) else v
        for k, v in parsed_data.items()
    }
