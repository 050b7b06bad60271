"""
Test CycleDetector
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from depgraph.ordering import DependencyOrdering, OrderingFailure


def test_acyclic_graph_has_no_cycles():
    ordering = DependencyOrdering()
    ordering.add_dependency("B", "A")
    ordering.add_dependency("C", "B")

    report = ordering.detect_cycles()
    assert not report.has_cycles
    assert report.cycles == []


def test_two_node_cycle():
    """A -> B, B -> A is reported as the closed path [A, B, A]"""
    print("\n=== Test: Two-node cycle ===")

    ordering = DependencyOrdering()
    ordering.add_dependency("A", "B")
    ordering.add_dependency("B", "A")

    report = ordering.detect_cycles()
    print(f"Cycles: {report.cycles}")

    assert report.has_cycles, "Cycle should be detected"
    assert report.cycles == [["A", "B", "A"]], f"Unexpected cycles: {report.cycles}"

    order = ordering.get_topological_order()
    assert not order.success
    assert order.order == []
    assert order.cycles == [["A", "B", "A"]]
    assert order.failure == OrderingFailure.CYCLE_DETECTED

    levels = ordering.get_dependency_levels()
    assert not levels.success
    assert levels.levels == []
    assert levels.cycles == [["A", "B", "A"]]

    print("[PASS]")


def test_self_dependency():
    ordering = DependencyOrdering()
    ordering.add_dependency("X", "X")

    report = ordering.detect_cycles()
    assert report.cycles == [["X", "X"]], f"Unexpected cycles: {report.cycles}"


def test_cycles_in_separate_components_are_all_found():
    """Scanning continues after the first cycle"""
    ordering = DependencyOrdering()
    ordering.add_dependency("A", "B")
    ordering.add_dependency("B", "A")
    ordering.add_dependency("C", "D")
    ordering.add_dependency("D", "E")
    ordering.add_dependency("E", "C")
    ordering.add_node("F")
    ordering.add_dependency("G", "F")

    report = ordering.detect_cycles()

    assert report.has_cycles
    assert len(report.cycles) == 2, f"Expected 2 cycles, got {report.cycles}"
    assert ["A", "B", "A"] in report.cycles
    assert ["C", "D", "E", "C"] in report.cycles


def test_cycle_is_closed_path_of_real_edges():
    """Every consecutive pair in a reported cycle is an actual dependency edge"""
    ordering = DependencyOrdering()
    ordering.add_dependency("start", "a")
    ordering.add_dependency("a", "b")
    ordering.add_dependency("b", "c")
    ordering.add_dependency("c", "a")

    report = ordering.detect_cycles()
    assert len(report.cycles) == 1, report.cycles

    cycle = report.cycles[0]
    assert cycle[0] == cycle[-1], f"Cycle should be closed: {cycle}"
    assert "start" not in cycle, "Node outside the loop should not be reported"
    for node_id, dep in zip(cycle, cycle[1:]):
        assert dep in ordering.get_dependencies(node_id), f"{node_id} -> {dep} is not an edge"


def test_dependent_of_cycle_is_not_a_cycle():
    ordering = DependencyOrdering()
    ordering.add_dependency("A", "B")
    ordering.add_dependency("B", "A")
    ordering.add_dependency("C", "A")

    report = ordering.detect_cycles()
    assert report.cycles == [["A", "B", "A"]], report.cycles


def test_deep_chain_does_not_recurse():
    """A long chain is scanned without hitting the recursion limit"""
    ordering = DependencyOrdering()
    depth = sys.getrecursionlimit() * 3
    for i in range(1, depth):
        ordering.add_dependency(i, i - 1)

    report = ordering.detect_cycles()
    assert not report.has_cycles

    # Close the loop from the far end back to the start
    ordering.add_dependency(0, depth - 1)
    report = ordering.detect_cycles()
    assert report.has_cycles
    assert len(report.cycles[0]) == depth + 1, f"Cycle length {len(report.cycles[0])}"
