"""Tests for planning/planner.py."""

from unittest.mock import MagicMock

import pytest

from simplecloud.core.errors import ErrorCode, PlanningError
from simplecloud.planning import TopologicalPlanner
from simplecloud.resources import LazyResource


def lazy(resource_id, *deps):
    resource = LazyResource(id=resource_id, input={}, manager=MagicMock())
    for dep in deps:
        resource.add_dependency(dep)
    return resource


def ids(resources):
    return [r.id for r in resources]


class TestTopoSortForCreation:
    """Tests for creation ordering."""

    def test_empty(self):
        assert TopologicalPlanner().topo_sort_for_creation() == []

    def test_independent_resources_keep_declaration_order(self):
        planner = TopologicalPlanner()
        for rid in ("c", "a", "b"):
            planner.add_resource(lazy(rid))

        assert ids(planner.topo_sort_for_creation()) == ["c", "a", "b"]

    def test_dependency_precedes_dependent(self):
        planner = TopologicalPlanner()
        planner.add_resource(lazy("asg", "template", "subnet"))
        planner.add_resource(lazy("subnet", "vpc"))
        planner.add_resource(lazy("template"))
        planner.add_resource(lazy("vpc"))

        order = ids(planner.topo_sort_for_creation())

        assert order.index("vpc") < order.index("subnet") < order.index("asg")
        assert order.index("template") < order.index("asg")

    def test_ties_broken_by_declaration(self):
        """Among ready resources the earliest declared goes first."""
        planner = TopologicalPlanner()
        planner.add_resource(lazy("b", "root"))
        planner.add_resource(lazy("a", "root"))
        planner.add_resource(lazy("root"))

        assert ids(planner.topo_sort_for_creation()) == ["root", "b", "a"]

    def test_undeclared_dependency_ignored(self):
        """Ids not declared in this run impose no ordering."""
        planner = TopologicalPlanner()
        planner.add_resource(lazy("a", "elsewhere"))

        assert ids(planner.topo_sort_for_creation()) == ["a"]

    def test_explicit_depends_on(self):
        planner = TopologicalPlanner()
        planner.add_resource(
            LazyResource(id="b", input={}, manager=MagicMock(), explicit_depends_on=["a"])
        )
        planner.add_resource(lazy("a"))

        assert ids(planner.topo_sort_for_creation()) == ["a", "b"]

    def test_self_dependency_is_cycle(self):
        planner = TopologicalPlanner()
        planner.add_resource(lazy("a", "a"))

        with pytest.raises(PlanningError) as exc_info:
            planner.topo_sort_for_creation()

        assert exc_info.value.code == ErrorCode.DEPENDENCY_CYCLE
        assert exc_info.value.details["cycle"] == "a -> a"

    def test_cycle_reported_with_path(self):
        planner = TopologicalPlanner()
        planner.add_resource(lazy("root"))
        planner.add_resource(lazy("a", "c", "root"))
        planner.add_resource(lazy("b", "a"))
        planner.add_resource(lazy("c", "b"))

        with pytest.raises(PlanningError) as exc_info:
            planner.topo_sort_for_creation()

        assert exc_info.value.code == ErrorCode.DEPENDENCY_CYCLE
        assert exc_info.value.details["cycle"] == "a -> c -> b -> a"


class TestTopoSortForDeletion:
    """Tests for deletion ordering."""

    def test_reverse_of_creation(self):
        planner = TopologicalPlanner()
        planner.add_resource(lazy("child", "parent"))
        planner.add_resource(lazy("parent"))

        assert ids(planner.topo_sort_for_creation()) == ["parent", "child"]
        assert ids(planner.topo_sort_for_deletion()) == ["child", "parent"]

    def test_cycle_also_fails_deletion(self):
        planner = TopologicalPlanner()
        planner.add_resource(lazy("a", "b"))
        planner.add_resource(lazy("b", "a"))

        with pytest.raises(PlanningError):
            planner.topo_sort_for_deletion()

    def test_resources_returns_copy(self):
        planner = TopologicalPlanner()
        planner.add_resource(lazy("a"))

        planner.resources().clear()

        assert ids(planner.resources()) == ["a"]
