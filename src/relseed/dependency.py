"""Dependency graph with cycle reporting."""

from collections import deque

from relseed.exceptions import CircularDependencyError

WHITE, GRAY, BLACK = 0, 1, 2


class DependencyGraph:
    """
    Directed graph for entity type dependencies.

    Edges run target -> source: the referenced type must be generated before
    the type holding the foreign key. Self-references add no edge since they
    are resolved inside a single batch.
    """

    def __init__(self):
        # dict keeps registration order so ties are broken the same way every run
        self._graph: dict[type, list[type]] = {}

    def add_entity(self, entity_type: type) -> None:
        """Add an entity type to the graph."""
        if entity_type not in self._graph:
            self._graph[entity_type] = []

    def add_relation(self, source: type, target: type) -> None:
        """Add a dependency: source references target."""
        if source is target:
            return
        self.add_entity(source)
        self.add_entity(target)
        if source not in self._graph[target]:
            self._graph[target].append(source)

    def get_dependents(self, entity_type: type) -> list[type]:
        """Get all types that reference this type."""
        return list(self._graph.get(entity_type, []))

    def find_cycle(self) -> list[str] | None:
        """
        Find a cycle using a three-colour depth-first search.

        Returns:
            Type names along the cycle, from the back-edge target to the node
            that closed it, or None when the graph is acyclic
        """
        color = dict.fromkeys(self._graph, WHITE)
        parent: dict[type, type | None] = dict.fromkeys(self._graph)

        def visit(node: type) -> tuple[type, type] | None:
            color[node] = GRAY
            for neighbour in self._graph[node]:
                if color[neighbour] == GRAY:
                    return neighbour, node
                if color[neighbour] == WHITE:
                    parent[neighbour] = node
                    found = visit(neighbour)
                    if found:
                        return found
            color[node] = BLACK
            return None

        for node in self._graph:
            if color[node] != WHITE:
                continue
            found = visit(node)
            if found is None:
                continue

            start, end = found
            path = [end]
            while path[-1] is not start:
                path.append(parent[path[-1]])
            path.reverse()
            return [t.__name__ for t in path]

        return None

    def topological_sort(self) -> list[type]:
        """
        Sort entity types in dependency order using Kahn's algorithm.

        Returns:
            Types in order such that every referenced type comes first.

        Raises:
            CircularDependencyError: If a cross-type cycle exists
        """
        cycle = self.find_cycle()
        if cycle is not None:
            raise CircularDependencyError(cycle)

        in_degree = dict.fromkeys(self._graph, 0)
        for dependents in self._graph.values():
            for dependent in dependents:
                in_degree[dependent] += 1

        queue = deque(t for t, degree in in_degree.items() if degree == 0)
        result = []

        while queue:
            entity_type = queue.popleft()
            result.append(entity_type)

            for dependent in self._graph[entity_type]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(result) != len(self._graph):
            raise CircularDependencyError(self.find_cycle() or ["unknown cycle"])

        return result
