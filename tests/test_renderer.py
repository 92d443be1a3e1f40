"""Tests for rendering translations as Terraform JSON."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from deployunit.models import Declaration, Reference, Template, Translation
from deployunit.renderer import (
    dumps,
    render_declaration,
    render_declarations,
    render_terraform_json,
    render_value,
)
from deployunit.translators import translate
from tests.fixtures.unit_samples import ai_agent_unit


def test_render_value_interpolates_nested_references() -> None:
    value = {
        "ids": [Reference("aws_iam_role.web", "arn")],
        "resource_id": Template("service/default/", Reference("aws_ecs_service.web", "name")),
        "count": 2,
    }
    assert render_value(value) == {
        "ids": ["${aws_iam_role.web.arn}"],
        "resource_id": "service/default/${aws_ecs_service.web.name}",
        "count": 2,
    }


def test_render_declaration_adds_depends_on() -> None:
    declaration = Declaration(
        "aws_ecs_task_definition",
        "web",
        {"family": "web"},
        depends_on=("aws_cloudwatch_log_group.web",),
    )
    assert render_declaration(declaration) == {
        "family": "web",
        "depends_on": ["aws_cloudwatch_log_group.web"],
    }
    # Rendering leaves the declaration untouched
    assert "depends_on" not in declaration.attributes


def test_terraform_json_document() -> None:
    translations = [translate(ai_agent_unit(), provider) for provider in ("aws", "azure")]
    document = render_terraform_json(translations)

    assert document["terraform"]["required_providers"] == {
        "aws": {"source": "hashicorp/aws"},
        "azurerm": {"source": "hashicorp/azurerm"},
    }
    assert document["provider"] == {"azurerm": {"features": {}}}
    assert "ai_agent" in document["resource"]["aws_ecs_service"]
    assert "ai_agent" in document["resource"]["azurerm_container_app"]
    service = document["resource"]["aws_ecs_service"]["ai_agent"]
    assert service["task_definition"] == "${aws_ecs_task_definition.ai_agent.arn}"


def test_provider_block_omitted_without_azure() -> None:
    document = render_terraform_json([translate(ai_agent_unit("gcp"))])
    assert "provider" not in document
    assert list(document["terraform"]["required_providers"]) == ["google"]


def test_render_declarations_lists_references() -> None:
    rendered = render_declarations([translate(ai_agent_unit("gcp"))])

    assert [entry["address"] for entry in rendered] == [
        "google_service_account.ai_agent",
        "google_cloud_run_v2_service.ai_agent",
        "google_logging_project_sink.ai_agent",
    ]
    assert rendered[0]["references"] == []
    assert rendered[1]["references"] == ["google_service_account.ai_agent"]
    assert {entry["unit"] for entry in rendered} == {"ai-agent"}


def test_dumps_is_deterministic() -> None:
    first = dumps(render_terraform_json([translate(ai_agent_unit())]))
    second = dumps(render_terraform_json([translate(ai_agent_unit())]))

    assert first == second
    assert first.endswith("\n")
    assert json.loads(first)["resource"]["aws_appautoscaling_target"]["ai_agent"][
        "max_capacity"
    ] == 10


def test_empty_translation_list() -> None:
    assert render_terraform_json([]) == {
        "terraform": {"required_providers": {}},
        "resource": {},
    }
    assert render_declarations([Translation("web", "aws", ())]) == []
