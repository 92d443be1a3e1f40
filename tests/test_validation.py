"""Validation tests for deployment unit field constraints.

These tests check that malformed units are rejected before any declaration
is produced, and that every failing field is reported.
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from deployunit.exceptions import ValidationError
from deployunit.models import Ingress, Resources, Scaling, SecretRef
from deployunit.validator import check_unique_names, validate_unit
from tests.fixtures.unit_samples import ai_agent_unit, full_unit


def test_valid_units_returned_unchanged() -> None:
    unit = full_unit()
    assert validate_unit(unit) is unit
    assert validate_unit(ai_agent_unit("azure")).provider == "azure"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"resources": Resources(cpu=0, memory=1024)}, "resources.cpu"),
        ({"resources": Resources(cpu=512, memory=-1)}, "resources.memory"),
        ({"scaling": Scaling(min_instances=5, max_instances=2)}, "scaling.min_instances"),
        ({"scaling": Scaling(min_instances=-1, max_instances=2)}, "scaling.min_instances"),
        (
            {"scaling": Scaling(min_instances=1, max_instances=2, target_cpu_utilization=0)},
            "scaling.target_cpu_utilization",
        ),
        ({"name": ""}, "name"),
        ({"name": "AI_Agent"}, "name"),
        ({"name": "a" * 64}, "name"),
        ({"container_image": "  "}, "container_image"),
        ({"environment": {"1BAD": "x"}}, "environment.1BAD"),
        ({"ingress": Ingress(port=70000)}, "ingress.port"),
    ],
)
def test_single_violation_names_field(overrides, field) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_unit(ai_agent_unit(**overrides))

    assert exc_info.value.field == field
    assert len(exc_info.value.errors) == 1


def test_zero_instances_allowed() -> None:
    unit = ai_agent_unit(scaling=Scaling(min_instances=0, max_instances=0))
    assert validate_unit(unit) is unit


def test_all_violations_collected() -> None:
    unit = ai_agent_unit(
        resources=Resources(cpu=0, memory=1024),
        scaling=Scaling(min_instances=5, max_instances=2),
    )
    with pytest.raises(ValidationError) as exc_info:
        validate_unit(unit)

    error = exc_info.value
    assert error.field == "resources.cpu"
    assert [field for field, _ in error.errors] == [
        "resources.cpu",
        "scaling.min_instances",
    ]
    assert "1 more violation" in str(error)


def test_secret_shadowing_environment_rejected() -> None:
    unit = full_unit(
        environment={"API_KEY": "plain"},
        secrets={"API_KEY": SecretRef("arn:aws:secretsmanager:x")},
    )
    with pytest.raises(ValidationError) as exc_info:
        validate_unit(unit)

    assert exc_info.value.field == "secrets.API_KEY"


def test_empty_secret_reference_rejected() -> None:
    unit = full_unit(secrets={"TOKEN": SecretRef("")})
    with pytest.raises(ValidationError) as exc_info:
        validate_unit(unit)

    assert exc_info.value.field == "secrets.TOKEN"


def test_duplicate_unit_names_rejected() -> None:
    first = ai_agent_unit("aws")
    second = replace(first, provider="gcp")
    with pytest.raises(ValidationError) as exc_info:
        check_unique_names([first, second])

    assert exc_info.value.field == "name"
    assert "ai-agent" in str(exc_info.value)


def test_distinct_unit_names_accepted() -> None:
    check_unique_names([ai_agent_unit(), full_unit()])
