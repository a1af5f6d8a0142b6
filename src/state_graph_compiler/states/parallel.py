"""
Parallel and Map states.

Both own nested graphs: a Parallel runs each branch concurrently, a Map runs
its iterator once per item of an input array. The nested graphs render as
self-contained documents but share the name namespace of the outer graph.
"""

from typing import Any, Dict, List, Optional

from ..errors import InvalidStateConfiguration
from ..scope import Scope
from .base import State, StateType, check_non_negative_int


class Parallel(State):
    """Run several branches concurrently and collect their outputs as an array."""

    state_type = StateType.PARALLEL

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
        result_path: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(scope, state_id, state_name, comment, input_path, output_path)
        self.result_path = result_path
        self.parameters = parameters
        self.branches: List[State] = []

    def branch(self, *branches: Any) -> "Parallel":
        """Add one branch per chainable argument; each branch starts at its start state."""
        for branch in branches:
            self.branches.append(branch.start_state)
        return self

    def sub_graph_starts(self) -> List[State]:
        return list(self.branches)

    def validate(self) -> None:
        super().validate()
        if not self.branches:
            raise InvalidStateConfiguration(self.state_name, "Parallel must have at least one branch")

    def render_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if self.parameters is not None:
            fields["Parameters"] = self.parameters
        if self.result_path is not None:
            fields["ResultPath"] = self.result_path
        return fields


class Map(State):
    """Run the iterator graph for every item of the array at ``items_path``."""

    state_type = StateType.MAP

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        items_path: Optional[str] = None,
        max_concurrency: Optional[int] = None,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
        result_path: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(scope, state_id, state_name, comment, input_path, output_path)
        self.items_path = items_path
        self.max_concurrency = max_concurrency
        self.result_path = result_path
        self.parameters = parameters
        self.iterator_start: Optional[State] = None

    def iterator(self, chainable: Any) -> "Map":
        """
        Set the graph run for each item.

        Raises:
            InvalidStateConfiguration: If an iterator was already set
        """
        if self.iterator_start is not None:
            raise InvalidStateConfiguration(
                self.state_name, f"iterator already starts at '{self.iterator_start.state_name}'"
            )
        self.iterator_start = chainable.start_state
        return self

    def sub_graph_starts(self) -> List[State]:
        return [self.iterator_start] if self.iterator_start is not None else []

    def validate(self) -> None:
        super().validate()
        if self.iterator_start is None:
            raise InvalidStateConfiguration(self.state_name, "Map must have an iterator")
        if self.max_concurrency is not None:
            check_non_negative_int(self.state_name, "MaxConcurrency", self.max_concurrency)

    def render_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if self.items_path is not None:
            fields["ItemsPath"] = self.items_path
        if self.max_concurrency is not None:
            fields["MaxConcurrency"] = self.max_concurrency
        if self.parameters is not None:
            fields["Parameters"] = self.parameters
        if self.result_path is not None:
            fields["ResultPath"] = self.result_path
        return fields
