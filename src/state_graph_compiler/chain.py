"""
Chains of states.

A chain is a value holding a start state and the current frontier of open
ends, the states whose outgoing transition is still unset. Linking a chain to
a target wires every open end to the target's start and returns a new chain
whose open ends are the target's, so branching states (Choice, Parallel, Map)
can fan out and converge again on a common continuation.
"""

import logging
from typing import Any, Tuple

from .errors import DoubleWiring

logger = logging.getLogger(__name__)


class Chain:
    """
    Immutable ``{start, open_ends}`` value built with ``start``/``next``/``end``.

    Linking mutates the transitions of the open-end states (that is how the
    graph is assembled) but never a Chain: every operation returns a new one.
    """

    def __init__(self, start_state: Any, open_ends: Tuple[Any, ...]):
        self._start_state = start_state
        self._open_ends = tuple(open_ends)

    @property
    def start_state(self) -> Any:
        return self._start_state

    @property
    def open_ends(self) -> Tuple[Any, ...]:
        return self._open_ends

    @classmethod
    def start(cls, chainable: Any) -> "Chain":
        """
        Begin a chain from a state (or copy another chain).

        Args:
            chainable: A state or chain

        Returns:
            Chain with the same start and open ends as ``chainable``
        """
        return cls(chainable.start_state, chainable.open_ends)

    @classmethod
    def sequence(cls, first: Any, second: Any) -> "Chain":
        """Chain ``first`` then ``second``."""
        return cls.start(first).next(second)

    def next(self, target: Any) -> "Chain":
        """
        Wire every open end of this chain to the start of ``target``.

        Each open end gets ``Next`` (a Choice gets its ``Default``) set to the
        target's start state. Wiring is all-or-nothing: every open end is checked
        before any of them is modified.

        Args:
            target: State, chain or state name to continue with

        Returns:
            New chain starting where this one starts, with the open ends of ``target``

        Raises:
            DoubleWiring: If this chain has no open ends or one of them is already wired
        """
        # Imported here: states depend on Chain for their fluent helpers
        from .states.base import to_transition

        if not self._open_ends:
            raise DoubleWiring(self._start_state.state_name, "a chain with no open ends", "a continuation")
        transition, target_open_ends = to_transition(target)
        for state in self._open_ends:
            state.check_can_wire(f"a transition to '{transition.name}'")
        for state in self._open_ends:
            state.wire_next(transition)
        logger.debug(
            "Wired %s to '%s'", ", ".join(repr(state.state_name) for state in self._open_ends), transition.name
        )
        return Chain(self._start_state, target_open_ends)

    def end(self) -> "Chain":
        """
        Mark every open end as the end of its branch.

        Returns:
            New chain with the same start and no open ends

        Raises:
            DoubleWiring: If this chain has no open ends or one of them is already wired
        """
        if not self._open_ends:
            raise DoubleWiring(self._start_state.state_name, "a chain with no open ends", "End")
        for state in self._open_ends:
            state.check_can_end()
        for state in self._open_ends:
            state.mark_end()
        return Chain(self._start_state, ())

    def __repr__(self) -> str:
        ends = ", ".join(state.state_name for state in self._open_ends)
        return f"Chain(start={self._start_state.state_name!r}, open_ends=[{ends}])"
