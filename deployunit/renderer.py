"""Rendering of translated declarations.

Turns Translation objects into documents the provisioning engine reads:
a Terraform JSON configuration (``*.tf.json``) or a flat ordered list of
declarations. Output is deterministic so repeated renders are byte-identical.
"""

import json
from typing import Any, Dict, List, Sequence

import deployunit.config_loader as config_loader
from deployunit.models import Declaration, Reference, Template, Translation


def render_value(value: Any) -> Any:
    """Replace references and templates with Terraform interpolations."""
    if isinstance(value, (Reference, Template)):
        return value.interpolation()
    if isinstance(value, dict):
        return {key: render_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [render_value(item) for item in value]
    return value


def render_declaration(declaration: Declaration) -> Dict[str, Any]:
    """Block body of a declaration as Terraform JSON."""
    body = render_value(declaration.attributes)
    if declaration.depends_on:
        body["depends_on"] = list(declaration.depends_on)
    return body


def render_terraform_json(translations: Sequence[Translation]) -> Dict[str, Any]:
    """
    Build a Terraform JSON configuration document.

    Args:
        translations: Translations to merge into one configuration

    Returns:
        dict: {"terraform": {...}, "provider": {...}, "resource": {type: {name: body}}}
    """
    resources: Dict[str, Dict[str, Any]] = {}
    required_providers: Dict[str, Any] = {}
    provider_blocks: Dict[str, Any] = {}

    for translation in translations:
        cfg = config_loader.load_config(translation.provider)
        required_providers[cfg.TERRAFORM_PROVIDER_NAME] = {
            "source": cfg.TERRAFORM_PROVIDER
        }
        if cfg.PROVIDER_BLOCK:
            provider_blocks[cfg.TERRAFORM_PROVIDER_NAME] = dict(cfg.PROVIDER_BLOCK)
        for declaration in translation.declarations:
            resources.setdefault(declaration.resource_type, {})[
                declaration.name
            ] = render_declaration(declaration)

    document: Dict[str, Any] = {
        "terraform": {"required_providers": required_providers},
        "resource": resources,
    }
    if provider_blocks:
        document["provider"] = provider_blocks
    return document


def render_declarations(translations: Sequence[Translation]) -> List[Dict[str, Any]]:
    """Flat list of declarations, dependencies first, for inspection."""
    rendered = []
    for translation in translations:
        for declaration in translation.declarations:
            rendered.append(
                {
                    "unit": translation.unit_name,
                    "provider": translation.provider,
                    "address": declaration.address,
                    "references": declaration.references(),
                    "attributes": render_declaration(declaration),
                }
            )
    return rendered


def dumps(document: Any) -> str:
    """Serialise a rendered document deterministically."""
    return json.dumps(document, indent=2, sort_keys=True) + "\n"
