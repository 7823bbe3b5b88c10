"""Level assignment — rank every node into a horizontal column.

A node's level is the length of the longest path reaching it from any source
node (a node with no inbound value). Longest-path ranking guarantees that
every flow points strictly rightward when the graph is acyclic.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

import networkx as nx

from sankey_markup.errors import CycleError
from sankey_markup.layout.types import Edge

logger = logging.getLogger(__name__)


def build_flow_graph(edges: Iterable[Edge]) -> nx.DiGraph:
    """Build a DiGraph from aggregated edges.

    Node insertion order follows first appearance (source before target within
    an edge), which fixes node order within each level. Each edge carries its
    ``value`` attribute.
    """
    graph: nx.DiGraph = nx.DiGraph()
    for edge in edges:
        for label in (edge.source, edge.target):
            if label not in graph:
                graph.add_node(label)
        if graph.has_edge(edge.source, edge.target):
            graph[edge.source][edge.target]["value"] += edge.value
        else:
            graph.add_edge(edge.source, edge.target, value=edge.value)
    return graph


def source_nodes(graph: nx.DiGraph) -> list[str]:
    """Nodes with zero total inbound value, in node order."""
    return [n for n in graph.nodes if graph.in_degree(n, weight="value") == 0]


class LevelAssignment:
    """Result of level assignment.

    Attributes:
        graph:       The flow graph the levels were computed on.
        levels:      Maps node label → level index.
        level_count: ``max(level) + 1``.
    """

    def __init__(self, graph: nx.DiGraph, levels: dict[str, int], level_count: int) -> None:
        self.graph = graph
        self.levels = levels
        self.level_count = level_count

    @property
    def order(self) -> list[str]:
        """All node labels in first-appearance order."""
        return list(self.graph.nodes)

    def buckets(self) -> list[list[str]]:
        """Node labels grouped per level, each bucket in first-appearance order."""
        grouped: list[list[str]] = [[] for _ in range(self.level_count)]
        for label in self.graph.nodes:
            grouped[self.levels[label]].append(label)
        return grouped

    @classmethod
    def assign(cls, edges: Iterable[Edge]) -> LevelAssignment:
        """Assign longest-path levels with a worklist BFS from the source nodes.

        A node is re-enqueued whenever its level rises. In an acyclic graph no
        level can reach the node count, so a proposal that does means the
        walk is going round a cycle and ``CycleError`` is raised. Nodes never
        reached from a source stay at level 0.
        """
        graph = build_flow_graph(edges)
        node_count = graph.number_of_nodes()

        levels: dict[str, int] = {}
        queue: deque[str] = deque()
        for label in source_nodes(graph):
            levels[label] = 0
            queue.append(label)

        while queue:
            label = queue.popleft()
            candidate = levels[label] + 1
            for succ in graph.successors(label):
                current = levels.get(succ)
                if current is not None and candidate <= current:
                    continue
                if candidate >= node_count:
                    raise CycleError(succ, candidate)
                levels[succ] = candidate
                queue.append(succ)

        unreached = [label for label in graph.nodes if label not in levels]
        if unreached:
            # Fed only by a sourceless cycle; flows among them stay within one level.
            logger.debug("nodes unreachable from any source placed at level 0: %s", unreached)
        for label in unreached:
            levels[label] = 0

        level_count = (max(levels.values()) + 1) if levels else 0
        logger.debug("assigned %d nodes to %d levels", node_count, level_count)
        return cls(graph=graph, levels=levels, level_count=level_count)
