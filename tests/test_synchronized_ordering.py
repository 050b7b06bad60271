"""
Test SynchronizedDependencyOrdering (single-writer guard for shared graphs)
"""

import sys
import threading
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from depgraph.ordering import DependencyOrdering, SynchronizedDependencyOrdering


STORIES = [
    {"id": "A"},
    {"id": "B", "dependencies": ["A"], "priority": 2},
    {"id": "C", "dependencies": ["A"]},
    {"id": "D", "dependencies": ["B", "C"]},
]


def test_matches_unsynchronized_results():
    plain = DependencyOrdering()
    plain.build_from_stories(STORIES)

    shared = SynchronizedDependencyOrdering()
    shared.build_from_stories(STORIES)

    assert shared.get_topological_order() == plain.get_topological_order()
    assert shared.get_dependency_levels() == plain.get_dependency_levels()
    assert shared.get_ready_nodes({"A"}) == plain.get_ready_nodes({"A"})
    assert shared.get_blocked_nodes({"A"}) == plain.get_blocked_nodes({"A"})
    assert shared.get_stats() == plain.get_stats()
    assert shared.export_to_dot() == plain.export_to_dot()
    assert len(shared) == 4 and "D" in shared


def test_concurrent_writers_keep_invariants():
    """Several threads adding edges at once leave the maps consistent"""
    print("\n=== Test: Concurrent writers ===")

    shared = SynchronizedDependencyOrdering()
    thread_count = 8
    edges_per_thread = 200

    def writer(worker: int):
        for i in range(edges_per_thread):
            shared.add_dependency(f"w{worker}-{i + 1}", f"w{worker}-{i}")
            if i % 10 == 0:
                shared.get_ready_nodes()

    threads = [threading.Thread(target=writer, args=(w,)) for w in range(thread_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(shared) == thread_count * (edges_per_thread + 1), f"Got {len(shared)} nodes"
    assert shared.validate()["valid"], shared.validate()["issues"]
    assert shared.get_stats().edge_count == thread_count * edges_per_thread
    assert shared.get_topological_order().success

    print("[PASS]")


def test_ready_nodes_snapshot_completed_set():
    shared = SynchronizedDependencyOrdering()
    shared.build_from_stories(STORIES)
    completed = {"A"}

    ready = shared.get_ready_nodes(completed)
    completed.add("B")

    assert ready == ["B", "C"], f"Got {ready}"


def test_snapshot_and_clone_are_independent():
    shared = SynchronizedDependencyOrdering()
    shared.build_from_stories(STORIES)

    snapshot = shared.snapshot()
    cloned = shared.clone()
    shared.remove_node("D")

    assert isinstance(snapshot, DependencyOrdering)
    assert "D" in snapshot
    assert "D" in cloned
    assert "D" not in shared


def test_lock_allows_atomic_sequences():
    """Callers can hold the re-entrant lock across several calls"""
    shared = SynchronizedDependencyOrdering()

    with shared.lock:
        shared.add_node("A")
        shared.add_dependency("B", "A")
        ready = shared.get_ready_nodes()

    assert ready == ["A"]


def test_diagnostic_exports_and_queries_delegate():
    plain = DependencyOrdering()
    plain.build_from_stories(STORIES)

    shared = SynchronizedDependencyOrdering()
    shared.build_from_stories(STORIES)

    assert shared.to_mermaid() == plain.to_mermaid()
    assert shared.to_ascii() == plain.to_ascii()
    assert shared.has_node("B") and not shared.has_node("Z")
    assert shared.priority_of("B") == 2
    assert shared.priority_of("A") == 0
