"""String manipulation utilities for terraunit.

This module provides helpers for turning unit names into provider-safe
identifiers and for formatting resource quantities.
"""

import hashlib
import re

CPU_UNITS_PER_VCPU = 1024
MIB_PER_GIB = 1024


def to_identifier(name: str) -> str:
    """Convert a unit name into a Terraform block label.

    Args:
        name: Unit name (e.g. "ai-agent")

    Returns:
        Label using only letters, digits and underscores (e.g. "ai_agent")
    """
    label = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if not label or label[0].isdigit():
        label = "u_" + label
    return label


def truncate_name(name: str, max_length: int) -> str:
    """Shorten a name to max_length, keeping it unique with a hash suffix.

    Args:
        name: Name to shorten
        max_length: Maximum permitted length

    Returns:
        The name unchanged if short enough, otherwise a prefix plus a
        6 character digest of the full name
    """
    if len(name) <= max_length:
        return name
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:6]
    prefix = name[: max_length - len(digest) - 1].rstrip("-")
    return f"{prefix}-{digest}"


def cpu_to_cores(cpu: int) -> float:
    """CPU units to fractional vCPU cores (512 -> 0.5)."""
    return round(cpu / CPU_UNITS_PER_VCPU, 4)


def cpu_to_millicores(cpu: int) -> str:
    """CPU units to a Kubernetes style quantity (512 -> "500m")."""
    return f"{int(round(cpu * 1000 / CPU_UNITS_PER_VCPU))}m"


def memory_to_gib(memory: int) -> str:
    """Memory in MiB to a Gi quantity string (1024 -> "1Gi", 512 -> "0.5Gi")."""
    return f"{round(memory / MIB_PER_GIB, 4):g}Gi"


def parse_cpu(value) -> int:
    """Read a CPU request into CPU units.

    Integers are CPU units already (512). Floats are vCPU cores (0.5) and
    strings may carry a millicore suffix ("500m") or a core count ("0.5").

    Raises:
        ValueError: If the value is not a CPU quantity
    """
    if isinstance(value, bool):
        raise ValueError(f"not a CPU quantity: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value * CPU_UNITS_PER_VCPU))
    text = str(value).strip()
    if text.endswith("m"):
        return int(round(float(text[:-1]) * CPU_UNITS_PER_VCPU / 1000))
    if "." in text:
        return int(round(float(text) * CPU_UNITS_PER_VCPU))
    return int(text)


MEMORY_SUFFIXES = {"Gi": MIB_PER_GIB, "G": 1000, "Mi": 1, "M": 1}


def parse_memory(value) -> int:
    """Read a memory request into MiB ("1Gi" -> 1024, 512 -> 512).

    Raises:
        ValueError: If the value is not a memory quantity
    """
    if isinstance(value, bool):
        raise ValueError(f"not a memory quantity: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value))
    text = str(value).strip()
    for suffix, factor in MEMORY_SUFFIXES.items():
        if text.endswith(suffix):
            return int(round(float(text[: -len(suffix)]) * factor))
    return int(text)
