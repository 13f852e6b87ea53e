"""Traversal algorithms layered on the adjacency model.

Mixed into Graph. Every search resets the per-vertex traversal flags
before it starts and runs on an explicit work stack, so deep graphs do
not hit the interpreter recursion limit. Vertices move through the
states initial -> active -> ready (see VertexState); a vertex never goes
back from active to initial, and ready is terminal.
"""

import logging
from collections import deque

import numpy as np

from spectragraph.errors import VertexNotFoundError
from spectragraph.graph.vertex import Vertex, VertexState

log = logging.getLogger(__name__)


class Traversal:
    """Depth/breadth-first search, cycles, components and topological order."""

    vertices: tuple[Vertex, ...]

    def _reset_traversal_state(self) -> None:
        for v in self.vertices:
            v.reset()

    def _own_vertex(self, vertex: Vertex) -> Vertex:
        i = vertex.index
        if not (0 <= i < len(self.vertices)) or self.vertices[i] is not vertex:
            raise VertexNotFoundError(f"Vertex not found in graph: {vertex.name}")
        return vertex

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def depth_first_search(self, start: int | Vertex, goal: Vertex | None) -> int:
        """Depth-first search from `start` for `goal`.

        With an integer start the search is index driven: a stack of
        vertex indices, each pushed at most once. With a Vertex start the
        search follows the recursive visiting order (descend into each
        neighbour in adjacency order before the next one) and stops
        descending once the goal is marked. Both variants mark exactly
        the vertices they visited.

        Args:
            start: Start vertex index, or start vertex.
            goal: Vertex to look for; None explores everything reachable.

        Returns:
            Index of the goal if reached, else -1.
        """
        if isinstance(start, Vertex):
            return self._depth_first_from_vertex(self._own_vertex(start), goal)

        self._reset_traversal_state()
        pending = [start]
        queued = {start}
        while pending:
            i = pending.pop()
            queued.discard(i)
            vertex = self.vertices[i]
            vertex.mark()
            if vertex is goal:
                return i
            for neighbour in vertex.adjacency:
                k = neighbour.index
                if not neighbour.marked and k not in queued:
                    pending.append(k)
                    queued.add(k)
        return -1

    def _depth_first_from_vertex(self, start: Vertex, goal: Vertex | None) -> int:
        self._reset_traversal_state()
        stack = [iter((start,))]
        while stack:
            vertex = next(stack[-1], None)
            if vertex is None:
                stack.pop()
                continue
            if vertex.marked or (goal is not None and goal.marked):
                continue
            vertex.mark()
            stack.append(iter(vertex.adjacency))

        if goal is not None and goal.marked:
            return goal.index
        return -1

    def _breadth_first_search(self, start: Vertex, goal: Vertex | None) -> int:
        """FIFO breadth-first search; returns the goal index or -1."""
        self._reset_traversal_state()
        start.mark()
        queue = deque([start])
        while queue:
            vertex = queue.popleft()
            if vertex is goal:
                return vertex.index
            for neighbour in vertex.adjacency:
                if not neighbour.marked:
                    neighbour.mark()
                    queue.append(neighbour)
        return -1

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    def _find_cycles(
        self, root: Vertex, cycles: list[list[Vertex]], first_only: bool
    ) -> None:
        """Three-state cycle search from `root`, appending each cycle found.

        A cycle is the path from root to a vertex that is reached again
        while still active, with the repeated vertex appended at the end.
        """

        def enter(vertex: Vertex, path: list[Vertex]):
            if vertex.in_process:
                cycles.append(path + [vertex])
                return None
            if vertex.marked:
                return None
            vertex.in_process = True
            extended = path + [vertex]
            return vertex, extended, iter(vertex.adjacency)

        frame = enter(root, [])
        stack = [frame] if frame else []
        while stack:
            if first_only and cycles:
                return
            vertex, path, neighbours = stack[-1]
            neighbour = next(neighbours, None)
            if neighbour is None:
                stack.pop()
                vertex.in_process = False
                vertex.mark()
                continue
            frame = enter(neighbour, path)
            if frame:
                stack.append(frame)

    def get_cycles(self, x: Vertex) -> list[list[Vertex]]:
        """All cycles discovered by a depth-first search from `x`.

        On undirected graphs every edge is traversable both ways, so each
        edge reached from `x` shows up as a two-step cycle.
        """
        self._own_vertex(x)
        self._reset_traversal_state()
        cycles: list[list[Vertex]] = []
        self._find_cycles(x, cycles, first_only=False)
        return cycles

    def has_cycles(self) -> bool:
        """True if a depth-first search from any vertex meets an active vertex."""
        self._reset_traversal_state()
        cycles: list[list[Vertex]] = []
        for vertex in self.vertices:
            if not vertex.marked:
                self._find_cycles(vertex, cycles, first_only=True)
                if cycles:
                    return True
        return False

    # ------------------------------------------------------------------
    # Strongly connected components
    # ------------------------------------------------------------------

    def _component_members(self, x: Vertex) -> list[list[Vertex]]:
        """Tarjan's algorithm from `x` on an explicit stack.

        A vertex is active from discovery until its component is closed,
        then ready. Components come out in reverse topological order.
        """
        discovery: dict[int, int] = {}
        low: dict[int, int] = {}
        on_stack: list[Vertex] = []
        components: list[list[Vertex]] = []
        work: list[tuple[Vertex, object]] = []

        def discover(vertex: Vertex) -> None:
            discovery[vertex.index] = low[vertex.index] = len(discovery)
            vertex.in_process = True
            on_stack.append(vertex)
            work.append((vertex, iter(vertex.adjacency)))

        discover(x)
        while work:
            vertex, neighbours = work[-1]
            neighbour = next(neighbours, None)
            if neighbour is not None:
                state = neighbour.state
                if state is VertexState.INITIAL:
                    discover(neighbour)
                elif state is VertexState.ACTIVE:
                    low[vertex.index] = min(
                        low[vertex.index], discovery[neighbour.index]
                    )
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent.index] = min(low[parent.index], low[vertex.index])

            if low[vertex.index] == discovery[vertex.index]:
                component: list[Vertex] = []
                while True:
                    member = on_stack.pop()
                    member.in_process = False
                    member.mark()
                    component.append(member)
                    if member is vertex:
                        break
                components.append(component)

        return components

    def get_components(self, x: Vertex) -> list:
        """Strongly connected components reachable from `x`, as subgraphs.

        Each component becomes a subgraph whose vertices are copies in
        increasing original index order; components are ordered by their
        smallest original index.
        """
        self._own_vertex(x)
        self._reset_traversal_state()
        members = self._component_members(x)
        members = [sorted(c, key=lambda v: v.index) for c in members]
        members.sort(key=lambda c: c[0].index)
        log.debug(
            "Found %d strongly connected components from vertex %s",
            len(members),
            x.name,
        )
        return [self.subgraph(c) for c in members]

    def get_component_labels(self) -> np.ndarray:
        """Component id of every vertex, covering all vertices.

        Ids are assigned in order of each component's smallest vertex index.
        """
        self._reset_traversal_state()
        components: list[list[Vertex]] = []
        for vertex in self.vertices:
            if vertex.state is VertexState.INITIAL:
                components.extend(self._component_members(vertex))
        components.sort(key=lambda c: min(v.index for v in c))
        labels = np.full(len(self.vertices), -1, dtype=np.int64)
        for label, component in enumerate(components):
            for v in component:
                labels[v.index] = label
        return labels

    # ------------------------------------------------------------------
    # Topological order
    # ------------------------------------------------------------------

    def topological_sort(self) -> np.ndarray:
        """Kahn's algorithm.

        Returns:
            Int array sigma where sigma[v] is the 1-based position of vertex
            v in a topological order, or a zero-length array if the graph
            contains a cycle. Callers must check the length.
        """
        indegree = np.array(self.get_indegrees(), dtype=np.int64)
        sigma = np.zeros(len(self.vertices), dtype=np.int64)
        ready = deque(v for v in self.vertices if indegree[v.index] == 0)
        position = 0
        while ready:
            vertex = ready.popleft()
            position += 1
            sigma[vertex.index] = position
            for w in vertex.adjacency:
                indegree[w.index] -= 1
                if indegree[w.index] == 0:
                    ready.append(w)

        if position < len(self.vertices):
            log.debug("Topological sort failed: graph contains a cycle")
            return np.zeros(0, dtype=np.int64)
        return sigma
