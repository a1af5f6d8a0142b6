"""
State Graph to Amazon States Language (ASL) Serializer

This module renders a validated state graph into the nested document consumed
by AWS Step Functions:

- ``StartAt``: name of the start state
- ``States``: one entry per state of the graph, in discovery order
- ``TimeoutSeconds``: only when the graph has a timeout

Each state entry is the state's own fragment merged with its transitions
(``Next``/``End``, ``Retry``, ``Catch``). Choice states add ``Choices`` and
``Default``; Parallel and Map states embed nested documents produced by
serializing their branch/iterator graphs with this same serializer.
"""

import logging
from typing import Any, Dict

from ..states.base import State, StateType

logger = logging.getLogger(__name__)


class AslSerializer:
    """
    Serializes a ``StateGraph`` into an ASL document.

    The serializer dispatches on the state's ``StateType`` tag. Rendering is
    deterministic: the same graph always produces the same document, so the
    JSON text can be cached or hashed by callers.
    """

    def serialize(self, graph: Any) -> Dict[str, Any]:
        """
        Serialize a graph and, recursively, its nested graphs.

        Args:
            graph: The StateGraph to render; it is validated on first access

        Returns:
            Dictionary with StartAt, States and optional TimeoutSeconds
        """
        states = graph.states
        document: Dict[str, Any] = {
            "StartAt": graph.start_state.state_name,
            "States": {name: self._serialize_state(graph, state) for name, state in states.items()},
        }
        if graph.timeout_seconds is not None:
            document["TimeoutSeconds"] = graph.timeout_seconds
        logger.debug("Serialized %s (%d states)", graph.graph_label, len(states))
        return document

    def _serialize_state(self, graph: Any, state: State) -> Dict[str, Any]:
        """
        Render one state according to its kind.

        Raises:
            ValueError: If the state type is unknown or unsupported
        """
        state_type = state.state_type

        if state_type == StateType.CHOICE:
            return self._serialize_choice(state)
        elif state_type == StateType.PARALLEL:
            return self._serialize_parallel(graph, state)
        elif state_type == StateType.MAP:
            return self._serialize_map(graph, state)
        elif state_type in (StateType.TASK, StateType.WAIT, StateType.PASS):
            return self._with_transitions(state, state.render_fragment())
        elif state_type in (StateType.SUCCEED, StateType.FAIL):
            # Terminal kinds carry neither Next nor End
            return state.render_fragment()
        else:
            raise ValueError(f"Unknown state type: {state_type}")

    def _serialize_choice(self, state: State) -> Dict[str, Any]:
        fragment = state.render_fragment()
        choices = []
        for rule in state.rules:
            rendered = rule.condition.to_json()
            rendered["Next"] = rule.transition.name
            choices.append(rendered)
        fragment["Choices"] = choices
        if state.default is not None:
            fragment["Default"] = state.default.name
        return fragment

    def _serialize_parallel(self, graph: Any, state: State) -> Dict[str, Any]:
        fragment = state.render_fragment()
        fragment["Branches"] = [self.serialize(branch) for branch in graph.sub_graphs(state)]
        return self._with_transitions(state, fragment)

    def _serialize_map(self, graph: Any, state: State) -> Dict[str, Any]:
        fragment = state.render_fragment()
        iterator_graph, = graph.sub_graphs(state)
        fragment["Iterator"] = self.serialize(iterator_graph)
        return self._with_transitions(state, fragment)

    def _with_transitions(self, state: State, fragment: Dict[str, Any]) -> Dict[str, Any]:
        """Append Next/End, then Retry and Catch in declaration order."""
        if state.next_transition is not None:
            fragment["Next"] = state.next_transition.name
        else:
            fragment["End"] = True
        if state.retries:
            fragment["Retry"] = [retry.to_json() for retry in state.retries]
        if state.catches:
            fragment["Catch"] = [catch.to_json() for catch in state.catches]
        return fragment
