"""Question dependency graph and deterministic ordering.

The graph is kept as two plain containers -- the node list (question ids in
declaration order) and the edge list of ``(dependency, dependent)`` pairs --
because that is all the sorter and the stabilisation pass need.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from stencil.errors import CycleDetectedError
from stencil.questions.models import Question


@dataclass
class Graph:
    """A directed graph of "must be answered before" edges."""

    nodes: list[str] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)


def build_graph(questions: list[Question]) -> Graph:
    """Build the dependency graph for a question set.

    Every predicate of every ``depends_on`` contributes one edge
    ``(referenced_id, question_id)``.  Duplicate edges are kept and
    references to unknown questions are not validated here.
    """
    nodes = [q.id for q in questions]
    edges: list[tuple[str, str]] = []
    for question in questions:
        if question.depends_on is None:
            continue
        for referenced in question.depends_on.referenced_questions():
            edges.append((referenced, question.id))
    return Graph(nodes=nodes, edges=edges)


def _in_degrees(graph: Graph) -> dict[str, int]:
    degrees = {node: 0 for node in graph.nodes}
    for src, dest in graph.edges:
        degrees.setdefault(src, 0)
        degrees[dest] = degrees.get(dest, 0) + 1
    return degrees


def sort_graph(graph: Graph) -> list[str]:
    """Topologically sort *graph* with Kahn's algorithm.

    Nodes that only appear in edges (references to undeclared questions)
    take part in the sort but are left out of the result.

    Raises:
        CycleDetectedError: If any node is left with a non-zero in-degree.
    """
    in_degree = _in_degrees(graph)
    dependents: dict[str, list[str]] = {}
    for src, dest in graph.edges:
        dependents.setdefault(src, []).append(dest)

    queue = deque(node for node, count in in_degree.items() if count == 0)
    ordered: list[str] = []

    while queue:
        node = queue.popleft()
        ordered.append(node)
        for dependent in dependents.get(node, []):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(ordered) != len(in_degree):
        raise CycleDetectedError(graph.edges)

    declared = set(graph.nodes)
    return [node for node in ordered if node in declared]


def stabilize_topological_order(graph: Graph, ordered: list[str]) -> list[str]:
    """Put independent questions first, in the order the author wrote them.

    Nodes with no incoming edge in the original graph come first, in
    declaration order; every other node follows in *ordered* order.
    """
    in_degree = _in_degrees(graph)
    independent = [node for node in graph.nodes if in_degree[node] == 0]
    seen = set(independent)
    stable = list(independent)
    for node in ordered:
        if node not in seen:
            stable.append(node)
            seen.add(node)
    return stable


def question_order(questions: list[Question]) -> list[str]:
    """Return the stabilised ask order for *questions*."""
    graph = build_graph(questions)
    return stabilize_topological_order(graph, sort_graph(graph))
