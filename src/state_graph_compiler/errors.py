"""
Errors raised while assembling or compiling a state graph.

All of them are structural problems detected from the in-memory graph before
any document is produced, so none of them is worth retrying. Each error keeps
the offending state names (and construction paths where known) as attributes
so callers can point the author at the broken definition.
"""

from typing import List, Optional


class StateGraphError(ValueError):
    """Base class for every state graph assembly or compilation failure."""


class DuplicateStateName(StateGraphError):
    """
    Raised when two distinct states share a name in the same graph namespace.

    Nested Parallel branches and Map iterators share the namespace of the
    outermost graph, so a name clash between two branches is reported too.
    """

    def __init__(self, state_name: str, first_path: str, second_path: str, graph_label: str = ""):
        """
        Args:
            state_name: The clashing state name
            first_path: Construction path of the state that registered the name first
            second_path: Construction path of the state that tried to reuse it
            graph_label: Label of the graph being compiled, used in the message only
        """
        where = f" in {graph_label}" if graph_label else ""
        super().__init__(
            f"State with name '{state_name}' occurs in both '{first_path}' and '{second_path}'{where}. "
            f"All states must have unique names."
        )
        self.state_name = state_name
        self.first_path = first_path
        self.second_path = second_path


class UnresolvedTransition(StateGraphError):
    """Raised when a Next, Default, Choice rule or Catch target names no known state."""

    def __init__(self, source_name: str, target_name: str, field: str, graph_label: str = ""):
        """
        Args:
            source_name: Name of the state declaring the transition
            target_name: The name that could not be resolved
            field: Which transition field carries the reference (Next, Default, Choices, Catch)
            graph_label: Label of the graph the lookup happened in
        """
        where = f" '{graph_label}'" if graph_label else ""
        super().__init__(
            f"State '{source_name}' has a {field} transition to '{target_name}', "
            f"which is not a state of graph{where}"
        )
        self.source_name = source_name
        self.target_name = target_name
        self.field = field


class InvalidWaitSpecification(StateGraphError):
    """Raised when a Wait state sets zero, or more than one, of its duration fields."""

    def __init__(self, state_name: str, specified: List[str]):
        if specified:
            detail = f"got {', '.join(specified)}"
        else:
            detail = "got none"
        super().__init__(
            f"Wait state '{state_name}' must specify exactly one of "
            f"Seconds, Timestamp, SecondsPath or TimestampPath ({detail})"
        )
        self.state_name = state_name
        self.specified = specified


class DoubleWiring(StateGraphError):
    """Raised when a transition is set on a state that already has one."""

    def __init__(self, state_name: str, existing: str, attempted: Optional[str] = None):
        """
        Args:
            state_name: Name of the state being rewired
            existing: Description of the transition already present
            attempted: Description of the transition that was rejected
        """
        message = f"State '{state_name}' already has {existing}"
        if attempted:
            message += f"; cannot also set {attempted}"
        super().__init__(message)
        self.state_name = state_name


class EmptyStartState(StateGraphError):
    """Raised when a graph is requested without any start state."""

    def __init__(self, graph_label: str = ""):
        where = f" for '{graph_label}'" if graph_label else ""
        super().__init__(f"No start state supplied{where}")


class UnterminatedState(StateGraphError):
    """Raised when a state reaches compilation with neither Next nor End."""

    def __init__(self, state_name: str, path: str):
        super().__init__(
            f"State '{state_name}' ({path}) has no outgoing transition; "
            f"chain it to another state or mark it with end()"
        )
        self.state_name = state_name
        self.path = path


class InvalidStateConfiguration(StateGraphError):
    """Raised for kind-specific misconfiguration (bad fields, unsupported retry/catch)."""

    def __init__(self, state_name: str, reason: str):
        super().__init__(f"State '{state_name}': {reason}")
        self.state_name = state_name
        self.reason = reason
