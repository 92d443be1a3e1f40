"""Unit tests for deployunit/utils/graph_utils.py"""

import unittest
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from deployunit.exceptions import TranslationError
from deployunit.models import Declaration, Reference, Template
from deployunit.utils.graph_utils import (
    build_graphdict,
    order_declarations,
    unresolved_references,
)


def _decl(resource_type, name, **attributes):
    return Declaration(resource_type, name, attributes)


class TestBuildGraphdict(unittest.TestCase):
    """Test build_graphdict() adjacency output."""

    def test_references_collected(self):
        role = _decl("aws_iam_role", "app")
        service = _decl(
            "aws_ecs_service",
            "app",
            role=role.ref("arn"),
            resource_id=Template("service/default/", Reference("aws_iam_role.app", "name")),
        )
        graphdict = build_graphdict([role, service])
        self.assertEqual(
            graphdict,
            {"aws_iam_role.app": [], "aws_ecs_service.app": ["aws_iam_role.app"]},
        )

    def test_depends_on_counts_as_reference(self):
        log = _decl("aws_cloudwatch_log_group", "app")
        task = Declaration("aws_ecs_task_definition", "app", {}, depends_on=(log.address,))
        self.assertEqual(
            build_graphdict([log, task])["aws_ecs_task_definition.app"],
            ["aws_cloudwatch_log_group.app"],
        )


class TestOrderDeclarations(unittest.TestCase):
    """Test order_declarations() dependency ordering."""

    def test_ordered_input_unchanged(self):
        a = _decl("t", "a")
        b = _decl("t", "b", parent=a.ref())
        c = _decl("t", "c", parent=b.ref())
        self.assertEqual(order_declarations([a, b, c]), [a, b, c])

    def test_dependents_moved_after_dependencies(self):
        a = _decl("t", "a")
        b = _decl("t", "b", parent=a.ref())
        c = _decl("t", "c")
        ordered = order_declarations([b, c, a])
        self.assertEqual([d.name for d in ordered], ["c", "a", "b"])

    def test_dangling_reference_raises(self):
        b = _decl("t", "b", parent=Reference("t.missing"))
        self.assertEqual(unresolved_references([b]), ["t.b -> t.missing"])
        with self.assertRaises(TranslationError):
            order_declarations([b])

    def test_cycle_raises(self):
        a = _decl("t", "a", other=Reference("t.b"))
        b = _decl("t", "b", other=Reference("t.a"))
        with self.assertRaises(TranslationError) as context:
            order_declarations([a, b])
        self.assertIn("t.a", context.exception.context["addresses"])

    def test_duplicate_address_raises(self):
        with self.assertRaises(TranslationError):
            order_declarations([_decl("t", "a"), _decl("t", "a")])


if __name__ == "__main__":
    unittest.main()
