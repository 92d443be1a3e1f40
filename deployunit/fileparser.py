"""File parser module for terraunit.

This module reads deployment unit definitions from YAML, JSON or HCL
(``.tfvars``) files. A file holds either a single unit or an environment:
a ``units`` list with optional shared ``defaults`` and ``provider``.

Entries may use module option names (``app_name``, ``min_capacity``...) or
the nested descriptor shape (``resources: {cpu, memory}``,
``scaling: {min, max}``), in snake_case or camelCase.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from deployunit.exceptions import UnitFileError
from deployunit.invocation import unit_from_options
from deployunit.models import DeploymentUnit
from deployunit.utils.terraform_utils import tfvar_read
from deployunit.validator import check_unique_names

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")
JSON_SUFFIXES = (".json",)
HCL_SUFFIXES = (".tfvars", ".hcl")

# Nested descriptor sections and the option names their keys map to
NESTED_SECTIONS = {
    "resources": {"cpu": "cpu", "memory": "memory"},
    "scaling": {
        "min": "min_instances",
        "max": "max_instances",
        "min_instances": "min_instances",
        "max_instances": "max_instances",
        "target_cpu_utilization": "target_cpu_utilization",
    },
    "networking": {
        "vpc_or_network_id": "network_id",
        "network_id": "network_id",
        "subnet_ids": "subnet_ids",
    },
    "ingress": {"port": "container_port", "public": "public"},
}


def snake_case(key: str) -> str:
    """Convert camelCase keys (containerImage) to snake_case (container_image)."""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", key).lower()


def _unquote(value: Any) -> Any:
    # Some python-hcl2 releases keep the quotes around string literals
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    if isinstance(value, dict):
        return {_unquote(k): _unquote(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_unquote(item) for item in value]
    return value


def normalise_entry(entry: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten a unit entry into module options.

    Args:
        entry: Unit mapping as read from a file

    Returns:
        dict: Flat option mapping accepted by unit_from_options
    """
    options: Dict[str, Any] = {}
    for raw_key, value in entry.items():
        key = snake_case(str(raw_key))
        section = NESTED_SECTIONS.get(key)
        if section is not None and isinstance(value, Mapping):
            for raw_inner, inner_value in value.items():
                inner = snake_case(str(raw_inner))
                options[section.get(inner, inner)] = inner_value
        else:
            # Nested keys (environment names, labels) keep their spelling
            options[key] = value
    return options


def read_document(path: str) -> Dict[str, Any]:
    """Parse a unit file into a mapping.

    Raises:
        UnitFileError: If the file is missing, unreadable or not a mapping
    """
    filepath = Path(path)
    if not filepath.is_file():
        raise UnitFileError(f"Unit file not found: {path}", context={"filepath": path})

    suffix = filepath.suffix.lower()
    try:
        if suffix in HCL_SUFFIXES:
            document = _unquote(tfvar_read(str(filepath)))
        else:
            with open(filepath, "r") as f:
                if suffix in JSON_SUFFIXES:
                    document = json.load(f)
                else:
                    document = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise UnitFileError(
            f"Failed to parse unit file: {path}",
            context={"error": str(e), "filepath": path},
        ) from e

    if not isinstance(document, dict):
        raise UnitFileError(
            "Unit file must contain a mapping at the top level",
            context={"filepath": path},
        )
    logger.debug(f"Read unit file {path} ({suffix or 'yaml'})")
    return document


def parse_units(
    document: Mapping[str, Any], provider: Optional[str] = None, strict: bool = False
) -> List[DeploymentUnit]:
    """Build deployment units from a parsed document.

    Args:
        document: Single unit mapping or {"units": [...], "defaults": {...}}
        provider: Provider overriding the one named in the document
        strict: Reject unrecognised options

    Returns:
        List of units in file order

    Raises:
        UnitFileError: If ``units`` is not a list of mappings
        ValidationError: On malformed options or duplicate unit names
    """
    if "units" in document:
        entries = document["units"]
        if not isinstance(entries, list) or not all(
            isinstance(entry, Mapping) for entry in entries
        ):
            raise UnitFileError("'units' must be a list of mappings")
        defaults = normalise_entry(document.get("defaults") or {})
        if document.get("provider"):
            defaults.setdefault("provider", document["provider"])
    else:
        entries = [document]
        defaults = {}

    units = []
    for entry in entries:
        options = dict(defaults)
        options.update(normalise_entry(entry))
        units.append(
            unit_from_options(
                options, provider=provider or options.get("provider"), strict=strict
            )
        )

    check_unique_names(units)
    return units


def load_units(
    path: str, provider: Optional[str] = None, strict: bool = False
) -> List[DeploymentUnit]:
    """Read deployment units from a YAML, JSON or .tfvars file.

    Args:
        path: Path to the unit file
        provider: Provider overriding the one named in the file
        strict: Reject unrecognised options

    Returns:
        List of units in file order
    """
    return parse_units(read_document(path), provider=provider, strict=strict)
