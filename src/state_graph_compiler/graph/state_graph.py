"""
State graph traversal and validation.

A ``StateGraph`` is the set of states reachable from a start state. It is
computed lazily on first access and cached. Traversal is depth-first in
discovery order, so both the compiled document and the error messages are
reproducible.

Parallel branches and Map iterators become child graphs. Each child keeps its
own local ``States`` mapping for rendering, but every name is registered in
one namespace shared with the outermost graph, so two branches cannot reuse a
name even though each renders as a self-contained document.
"""

import logging
from typing import Any, Dict, List, Optional

from ..errors import (
    DuplicateStateName,
    EmptyStartState,
    InvalidStateConfiguration,
    StateGraphError,
    UnresolvedTransition,
)
from ..states.base import State, StateType
from ..transform.asl_serializer import AslSerializer
from ..transform.policy_aggregator import PolicyAggregator

logger = logging.getLogger(__name__)


class _Namespace:
    """Name registry shared by a graph and all of its nested graphs."""

    def __init__(self):
        self.states: Dict[str, State] = {}
        self.owners: Dict[int, "StateGraph"] = {}


class StateGraph:
    """
    The validated, flattened set of states reachable from a start state.

    Attributes:
        start_state (State): State the graph starts at
        graph_label (str): Human readable label, used in diagnostics only
        parent (Optional[StateGraph]): Enclosing graph for branch/iterator graphs
    """

    def __init__(
        self,
        start: Any,
        graph_label: str = "",
        timeout_seconds: Optional[int] = None,
        parent: Optional["StateGraph"] = None,
    ):
        """
        Args:
            start: Start state, or any chainable whose start state is used
            graph_label: Label used in error messages
            timeout_seconds: Maximum execution time of the whole graph

        Raises:
            EmptyStartState: If no start reference is given
        """
        if start is None:
            raise EmptyStartState(graph_label)
        self.start_state: State = start.start_state
        self.graph_label = graph_label or f"graph starting at '{self.start_state.state_name}'"
        self.parent = parent
        self.timeout_seconds = timeout_seconds
        self._states: Optional[Dict[str, State]] = None
        self._sub_graphs: Dict[int, List["StateGraph"]] = {}
        self._namespace: Optional[_Namespace] = None

    @property
    def timeout_seconds(self) -> Optional[int]:
        return self._timeout_seconds

    @timeout_seconds.setter
    def timeout_seconds(self, value: Optional[int]) -> None:
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            raise StateGraphError(f"TimeoutSeconds of {self.graph_label} must be a non-negative integer, got {value!r}")
        self._timeout_seconds = value

    @property
    def states(self) -> Dict[str, State]:
        """Local name -> state mapping of this graph, in discovery order."""
        self._ensure_computed()
        return self._states

    def _ensure_computed(self) -> None:
        if self._states is None:
            self._compute(_Namespace())

    @property
    def all_states(self) -> List[State]:
        """Every state of this graph and its nested graphs, in discovery order."""
        self._ensure_computed()
        return list(self._namespace.states.values())

    def sub_graphs(self, state: State) -> List["StateGraph"]:
        """Graphs owned by ``state`` (Parallel branches or the Map iterator), in declaration order."""
        self._ensure_computed()
        return self._sub_graphs.get(id(state), [])

    def _compute(self, namespace: _Namespace) -> None:
        """
        Discover, validate and register every state reachable from the start state.

        Raises:
            DuplicateStateName: If two distinct states share a name in the namespace
            UnresolvedTransition: If a transition names a state missing from this graph
            InvalidStateConfiguration: If a state is misconfigured or belongs to two graphs
        """
        self._namespace = namespace
        self._sub_graphs = {}
        local: Dict[str, State] = {}
        stack: List[State] = [self.start_state]

        while stack:
            state = stack.pop()
            existing = local.get(state.state_name)
            if existing is state:
                continue
            self._register(state, local, namespace)
            state.validate()

            for index, sub_start in enumerate(state.sub_graph_starts(), start=1):
                kind = "iterator" if state.state_type == StateType.MAP else f"branch {index}"
                child = StateGraph(sub_start, f"{self.graph_label} / {state.state_name} {kind}", parent=self)
                child._compute(namespace)
                self._sub_graphs.setdefault(id(state), []).append(child)

            # Push in reverse so targets are visited in declaration order
            targets = [transition.state for _, transition in state.outgoing_transitions() if transition.state is not None]
            for target in reversed(targets):
                if local.get(target.state_name) is not target:
                    stack.append(target)

        self._resolve_transitions(local)
        self._states = local
        logger.debug("Computed %s with %d state(s)", self.graph_label, len(local))

    def _register(self, state: State, local: Dict[str, State], namespace: _Namespace) -> None:
        name = state.state_name
        owner = namespace.owners.get(id(state))
        if owner is not None and owner is not self:
            raise InvalidStateConfiguration(
                name,
                f"used in {self.graph_label} but already part of {owner.graph_label}; "
                f"every state can only belong to one graph",
            )
        clash = namespace.states.get(name)
        if clash is not None and clash is not state:
            raise DuplicateStateName(name, clash.path, state.path, self.graph_label)
        # Distinct states named alike in one construction scope clash even if only one is reachable
        siblings = state.scope.states_named(name)
        if len(siblings) > 1:
            raise DuplicateStateName(name, siblings[0].path, siblings[1].path, self.graph_label)
        local[name] = state
        namespace.states[name] = state
        namespace.owners[id(state)] = self

    def _resolve_transitions(self, local: Dict[str, State]) -> None:
        """Check every transition, including name references, resolves in this graph."""
        for state in local.values():
            for field, transition in state.outgoing_transitions():
                if transition.name not in local:
                    raise UnresolvedTransition(state.state_name, transition.name, field, self.graph_label)

    def to_graph_json(self) -> Dict[str, Any]:
        """Render this graph as an Amazon States Language document."""
        return AslSerializer().serialize(self)

    @property
    def policy_statements(self) -> list:
        """Deduplicated permission statements required by every state in the graph."""
        return PolicyAggregator().aggregate(self)

    def __repr__(self) -> str:
        return f"StateGraph({self.graph_label!r})"
