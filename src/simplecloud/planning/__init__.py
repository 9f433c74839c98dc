"""Planning package: dependency-aware resource ordering."""

from simplecloud.planning.planner import Planner, TopologicalPlanner

__all__ = ["Planner", "TopologicalPlanner"]
