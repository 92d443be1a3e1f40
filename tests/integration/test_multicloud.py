"""Integration tests for translating units across providers.

The same unit is lowered for AWS, GCP and Azure; each translation must be
self-contained, ordered and reproducible.
"""

import sys
import unittest
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from deployunit.exceptions import (
    UnsupportedProviderError,
    ValidationError,
)
from deployunit.fileparser import load_units
from deployunit.models import SUPPORTED_PROVIDERS, Resources
from deployunit.renderer import dumps, render_terraform_json
from deployunit.translators import (
    TranslatorRegistry,
    get_translator,
    translate,
    translate_environment,
)
from deployunit.utils.graph_utils import unresolved_references
from tests.fixtures.unit_samples import ai_agent_unit, full_unit

FIXTURES = Path(__file__).parent.parent / "fixtures"


class TestMultiCloudTranslation(unittest.TestCase):
    """Test lowering one unit for every provider."""

    def test_registry_covers_supported_providers(self):
        self.assertEqual(TranslatorRegistry.list_providers(), sorted(SUPPORTED_PROVIDERS))
        for provider in SUPPORTED_PROVIDERS:
            self.assertEqual(get_translator(provider.upper()).provider_id, provider)

    def test_references_point_backwards(self):
        for unit in (ai_agent_unit(), full_unit()):
            for provider in SUPPORTED_PROVIDERS:
                with self.subTest(unit=unit.name, provider=provider):
                    translation = translate(unit, provider)
                    seen = set()
                    for declaration in translation.declarations:
                        for target in declaration.references():
                            self.assertIn(target, seen, declaration.address)
                        seen.add(declaration.address)
                    self.assertEqual(unresolved_references(translation.declarations), [])

    def test_resource_types_match_provider(self):
        for provider in SUPPORTED_PROVIDERS:
            translator = get_translator(provider)
            translation = translator.translate(full_unit(provider))
            for declaration in translation.declarations:
                self.assertIn(declaration.resource_type, translator.resource_types)

    def test_translation_is_idempotent(self):
        for provider in SUPPORTED_PROVIDERS:
            with self.subTest(provider=provider):
                first = translate(full_unit(provider))
                second = translate(full_unit(provider))
                self.assertEqual(first, second)
                self.assertEqual(
                    dumps(render_terraform_json([first])),
                    dumps(render_terraform_json([second])),
                )

    def test_unit_is_not_mutated(self):
        unit = full_unit()
        before = repr(unit)
        for provider in SUPPORTED_PROVIDERS:
            translate(unit, provider)
        self.assertEqual(repr(unit), before)

    def test_invalid_unit_rejected_for_every_provider(self):
        unit = ai_agent_unit(resources=Resources(cpu=0, memory=1024))
        for provider in SUPPORTED_PROVIDERS:
            with self.subTest(provider=provider):
                with self.assertRaises(ValidationError) as context:
                    translate(unit, provider)
                self.assertEqual(context.exception.field, "resources.cpu")

    def test_unknown_provider(self):
        with self.assertRaises(UnsupportedProviderError):
            get_translator("oracle")
        with self.assertRaises(UnsupportedProviderError):
            translate(ai_agent_unit(), "oracle")

    def test_translator_rejects_foreign_unit(self):
        with self.assertRaises(UnsupportedProviderError):
            get_translator("azure").translate(ai_agent_unit("gcp"))


class TestEnvironmentTranslation(unittest.TestCase):
    """Test translating a whole environment file."""

    def test_environment_file(self):
        translations = translate_environment(load_units(str(FIXTURES / "environment.yml")))

        self.assertEqual(
            [(t.unit_name, t.provider) for t in translations],
            [("agent-aws", "aws"), ("agent-gcp", "gcp"), ("agent-azure", "azure")],
        )
        gcp = translations[1].find("google_cloud_run_v2_service")[0]
        self.assertEqual(gcp.attributes["project"], "ml-platform")
        self.assertEqual(
            gcp.attributes["template"]["scaling"],
            {"min_instances": 2, "max_instances": 10},
        )
        azure = translations[2].find("azurerm_container_app")[0]
        self.assertTrue(azure.attributes["ingress"]["external_enabled"])

        document = render_terraform_json(translations)
        self.assertEqual(
            sorted(document["terraform"]["required_providers"]),
            ["aws", "azurerm", "google"],
        )

    def test_duplicate_names_rejected(self):
        with self.assertRaises(ValidationError):
            translate_environment([ai_agent_unit("aws"), ai_agent_unit("gcp")])

    def test_one_invalid_unit_fails_environment(self):
        units = [full_unit("aws"), ai_agent_unit("oracle")]
        with self.assertRaises(UnsupportedProviderError):
            translate_environment(units)


if __name__ == "__main__":
    unittest.main()
