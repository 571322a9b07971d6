"""Cycle guard for recursive schema descent.

Tracks the schema nodes currently on the descent stack by identity. A
document is immutable while generating and every reference resolves to the
one component instance, so re-entering a node that is already on the stack
means the schema graph loops back on itself. This guard is the only bound on
recursion depth.
"""

from api_hurl_gen.parser.base import Schema


class CycleGuard:
    """Immutable set of the schema nodes on the current descent stack."""

    __slots__ = ("_active",)

    def __init__(self, active: frozenset[int] = frozenset()):
        self._active = active

    def enters_cycle(self, schema: Schema) -> bool:
        return id(schema) in self._active

    def descend(self, schema: Schema) -> "CycleGuard":
        """Return a guard with ``schema`` pushed on the stack."""
        return CycleGuard(self._active | {id(schema)})

    def __len__(self) -> int:
        return len(self._active)
