"""
Graph Visualization
===================

Text renderings of a dependency graph for debugging:

- DOT (Graphviz) with nodes coloured by priority
- Mermaid flowchart annotated with dependency levels
- ASCII summary of levels, priorities and dependencies

Edges are drawn from a dependency to the node that requires it, i.e. in
execution order.
"""

from typing import Dict, List
import logging

from depgraph.ordering.graph_store import GraphStore, tiebreak_key
from depgraph.ordering.level_partitioner import LevelPartitioner
from depgraph.ordering.results import NodeId

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 40


def _escape_dot(value) -> str:
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def _sanitize_mermaid(text: str) -> str:
    text = text.replace('"', "'").replace('[', '(').replace(']', ')')
    if len(text) > MAX_LABEL_LENGTH:
        text = text[:MAX_LABEL_LENGTH - 3] + "..."
    return text


class GraphVisualizer:
    """Renders a GraphStore as DOT, Mermaid or ASCII text."""

    def __init__(self, store: GraphStore, partitioner: LevelPartitioner | None = None):
        self.store = store
        self.partitioner = partitioner or LevelPartitioner(store)

    def _sorted_nodes(self) -> List[NodeId]:
        return sorted(self.store.nodes(), key=tiebreak_key)

    def _label(self, node_id: NodeId) -> str:
        metadata = self.store.metadata_view(node_id)
        return str(metadata.get("title") or metadata.get("description") or node_id)

    def _priority_color(self, node_id: NodeId) -> str:
        priority = self.store.priority_of(node_id)
        if priority > self.store.config.dot_high_priority:
            return "red"
        if priority > self.store.config.dot_medium_priority:
            return "orange"
        return "lightblue"

    def to_dot(self) -> str:
        """
        Export the graph in Graphviz DOT format.

        Returns:
            DOT source for a digraph named DependencyGraph
        """
        lines = ["digraph DependencyGraph {"]
        lines.append("  rankdir=TB;")
        lines.append("  node [shape=box, style=rounded];")

        for node_id in self.store.nodes():
            lines.append(
                f'  "{_escape_dot(node_id)}" [fillcolor={self._priority_color(node_id)}, style=filled];'
            )

        for node_id in self.store.nodes():
            for dep in self.store.get_dependencies(node_id):
                lines.append(f'  "{_escape_dot(dep)}" -> "{_escape_dot(node_id)}";')

        lines.append("}")
        return "\n".join(lines)

    def to_mermaid(self) -> str:
        """
        Generate a Mermaid flowchart of the dependencies.

        Nodes are labelled with their title/description (falling back to the
        id) and, when the graph can be levelled, their level.

        Returns:
            Mermaid diagram string
        """
        if len(self.store) == 0:
            return "graph TD\n  Empty[No dependency graph available]"

        levels = self.partitioner.get_dependency_levels()
        level_of: Dict[NodeId, int] = {}
        for index, level in enumerate(levels.levels):
            for node_id in level:
                level_of[node_id] = index

        # Mermaid ids must be plain identifiers
        mermaid_ids = {node_id: f"N{i}" for i, node_id in enumerate(self._sorted_nodes())}

        lines = ["graph TD"]
        for node_id, mermaid_id in mermaid_ids.items():
            name = self._label(node_id)
            label = _sanitize_mermaid(str(node_id) if name == str(node_id) else f"{node_id}: {name}")
            if node_id in level_of:
                lines.append(f'  {mermaid_id}["{label}<br/>Level {level_of[node_id]}"]')
            else:
                lines.append(f'  {mermaid_id}["{label}"]')

        for node_id in self._sorted_nodes():
            for dep in self.store.get_dependencies(node_id):
                lines.append(f"  {mermaid_ids[dep]} --> {mermaid_ids[node_id]}")

        if levels.cycles:
            lines.append("")
            lines.append("  %% Circular dependencies detected")
            for cycle in levels.cycles:
                lines.append(f'  %% Cycle: {" -> ".join(str(n) for n in cycle)}')

        return "\n".join(lines)

    def to_ascii(self) -> str:
        """
        Generate an ASCII text summary of the dependency levels.

        Returns:
            Multi-line string listing each level's nodes with priority and
            dependencies, or the cycles when the graph cannot be levelled
        """
        lines = []
        lines.append("=" * 70)
        lines.append("DEPENDENCY GRAPH")
        lines.append("=" * 70)

        if len(self.store) == 0:
            lines.append("No dependency graph available")
            return "\n".join(lines)

        levels = self.partitioner.get_dependency_levels()

        for index, level in enumerate(levels.levels):
            lines.append(f"\nLEVEL {index} (can run in parallel):")
            lines.append("-" * 70)

            for node_id in level:
                lines.append(f"  [{node_id}] {self._label(node_id)}")
                lines.append(f"      Priority: {self.store.priority_of(node_id)}")

                deps = self.store.get_dependencies(node_id)
                if deps:
                    lines.append(f"      Depends on: {', '.join(str(d) for d in deps)}")
                else:
                    lines.append("      Depends on: None")

        if levels.cycles:
            lines.append("\n" + "!" * 70)
            lines.append("CIRCULAR DEPENDENCIES DETECTED:")
            lines.append("!" * 70)
            for cycle in levels.cycles:
                lines.append(f"  {' -> '.join(str(n) for n in cycle)}")

        lines.append("\n" + "=" * 70)
        lines.append(f"Total: {len(self.store)} nodes in {len(levels.levels)} levels")
        lines.append("=" * 70)

        return "\n".join(lines)
