"""
Dependency planner: turn a schema into a flat execution order.

Fields are resolved one after another within a record, so a total
topological order is all the engine needs.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from ..errors import CircularDependencyError
from .models import Schema, field_dependencies


@dataclass(frozen=True)
class ExecutionPlan:
    """Field names in the order they must be resolved."""
    order: Tuple[str, ...]

    def __iter__(self):
        return iter(self.order)

    def __len__(self) -> int:
        return len(self.order)


def build_execution_plan(schema: Schema) -> ExecutionPlan:
    """
    Build the execution plan by depth-first traversal.

    Prerequisites are visited before the field itself; independent fields
    keep schema declaration order.

    Raises:
        CircularDependencyError: On a back-edge, with the path that closed it
    """
    order: List[str] = []
    visited: Set[str] = set()

    def visit(name: str, path: List[str]) -> None:
        if name in visited:
            return
        if name in path:
            cycle_start = path.index(name)
            raise CircularDependencyError(path[cycle_start:] + [name])

        path.append(name)
        for dep in field_dependencies(schema[name]):
            if dep in schema:
                visit(dep, path)
        path.pop()

        visited.add(name)
        order.append(name)

    for name in schema:
        visit(name, [])

    return ExecutionPlan(order=tuple(order))


def find_cycle(schema: Schema) -> Optional[List[str]]:
    """Return the first dependency cycle found (closed path), or None."""
    try:
        build_execution_plan(schema)
    except CircularDependencyError as e:
        return e.path
    return None


def dependency_graph(schema: Schema) -> Dict[str, Tuple[str, ...]]:
    """Adjacency of each field to the fields it waits on."""
    return {name: field_dependencies(fld) for name, fld in schema.items()}
