"""Unit tests for deployunit/utils/string_utils.py"""

import unittest
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from deployunit.utils.string_utils import (
    cpu_to_cores,
    cpu_to_millicores,
    memory_to_gib,
    parse_cpu,
    parse_memory,
    to_identifier,
    truncate_name,
)


class TestToIdentifier(unittest.TestCase):
    """Test to_identifier() for Terraform block labels."""

    def test_hyphens_become_underscores(self):
        self.assertEqual(to_identifier("ai-agent"), "ai_agent")

    def test_leading_digit_is_prefixed(self):
        self.assertEqual(to_identifier("9lives"), "u_9lives")

    def test_plain_name_unchanged(self):
        self.assertEqual(to_identifier("worker"), "worker")


class TestTruncateName(unittest.TestCase):
    """Test truncate_name() for provider name length limits."""

    def test_short_name_unchanged(self):
        self.assertEqual(truncate_name("ai-agent-runner", 30), "ai-agent-runner")

    def test_long_name_fits_limit(self):
        name = "a-really-long-deployment-unit-name-runner"
        result = truncate_name(name, 30)
        self.assertLessEqual(len(result), 30)
        self.assertTrue(result.startswith("a-really-long"))

    def test_truncation_is_deterministic_and_distinct(self):
        first = truncate_name("x" * 40 + "-one", 30)
        second = truncate_name("x" * 40 + "-two", 30)
        self.assertEqual(first, truncate_name("x" * 40 + "-one", 30))
        self.assertNotEqual(first, second)


class TestQuantities(unittest.TestCase):
    """Test CPU and memory conversions."""

    def test_cpu_conversions(self):
        self.assertEqual(cpu_to_cores(512), 0.5)
        self.assertEqual(cpu_to_cores(2048), 2.0)
        self.assertEqual(cpu_to_millicores(512), "500m")
        self.assertEqual(cpu_to_millicores(1024), "1000m")

    def test_memory_to_gib(self):
        self.assertEqual(memory_to_gib(1024), "1Gi")
        self.assertEqual(memory_to_gib(512), "0.5Gi")

    def test_parse_cpu(self):
        self.assertEqual(parse_cpu(512), 512)
        self.assertEqual(parse_cpu(0.5), 512)
        self.assertEqual(parse_cpu("500m"), 512)
        self.assertEqual(parse_cpu("0.25"), 256)
        self.assertEqual(parse_cpu("1024"), 1024)

    def test_parse_memory(self):
        self.assertEqual(parse_memory(1024), 1024)
        self.assertEqual(parse_memory("1Gi"), 1024)
        self.assertEqual(parse_memory("0.5Gi"), 512)
        self.assertEqual(parse_memory("256Mi"), 256)

    def test_parse_rejects_garbage(self):
        with self.assertRaises(ValueError):
            parse_cpu("lots")
        with self.assertRaises(ValueError):
            parse_memory(True)


if __name__ == "__main__":
    unittest.main()
