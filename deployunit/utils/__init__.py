"""Utility modules for terraunit.

This package contains utility modules for name manipulation, Terraform
variable handling and declaration graph processing.
"""

from .string_utils import (
    to_identifier,
    truncate_name,
    cpu_to_cores,
    cpu_to_millicores,
    memory_to_gib,
    parse_cpu,
    parse_memory,
)
from .terraform_utils import getvar, tfvar_read
from .graph_utils import build_graphdict, order_declarations, unresolved_references

__all__ = [
    # String utilities
    "to_identifier",
    "truncate_name",
    "cpu_to_cores",
    "cpu_to_millicores",
    "memory_to_gib",
    "parse_cpu",
    "parse_memory",
    # Terraform utilities
    "getvar",
    "tfvar_read",
    # Graph utilities
    "build_graphdict",
    "order_declarations",
    "unresolved_references",
]
