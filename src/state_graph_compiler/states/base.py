"""
State node model shared by every state kind.

A state carries its own kind-specific fields plus its outgoing transitions:
an optional default ``Next`` (or ``End`` marker), and for the kinds that can
fail, an ordered list of Retry policies and Catch handlers. Transitions are
wired while chains are assembled; everything else is fixed at construction.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..chain import Chain
from ..errors import DoubleWiring, InvalidStateConfiguration, UnterminatedState
from ..scope import Scope


class StateType(str, Enum):
    """The closed set of state kinds."""

    TASK = "Task"
    CHOICE = "Choice"
    WAIT = "Wait"
    PARALLEL = "Parallel"
    MAP = "Map"
    PASS = "Pass"
    SUCCEED = "Succeed"
    FAIL = "Fail"


# Kinds that can raise errors and therefore accept Retry/Catch
RETRIABLE_TYPES = (StateType.TASK, StateType.PARALLEL, StateType.MAP)
# Kinds that end an execution path by themselves
TERMINAL_TYPES = (StateType.SUCCEED, StateType.FAIL)


class Errors:
    """Predefined error names of the States language."""

    ALL = "States.ALL"
    HEARTBEAT_TIMEOUT = "States.HeartbeatTimeout"
    TIMEOUT = "States.Timeout"
    TASK_FAILED = "States.TaskFailed"
    PERMISSIONS = "States.Permissions"
    RESULT_PATH_MATCH_FAILURE = "States.ResultPathMatchFailure"
    PARAMETER_PATH_FAILURE = "States.ParameterPathFailure"
    BRANCH_FAILED = "States.BranchFailed"
    NO_CHOICE_MATCHED = "States.NoChoiceMatched"


DEFAULT_RETRY_INTERVAL_SECONDS = 1
DEFAULT_RETRY_MAX_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF_RATE = 2.0


def check_non_negative_int(state_name: str, field_name: str, value: Any) -> None:
    """
    Reject anything but a non-negative integer for a seconds/count field.

    Raises:
        InvalidStateConfiguration: If ``value`` is a bool, a float, or negative
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidStateConfiguration(
            state_name, f"{field_name} must be a non-negative integer, got {value!r}"
        )


class Transition:
    """
    A reference from one state to another.

    The target is either a state object (followed during traversal) or a plain
    state name (resolved against the graph once traversal has finished).
    """

    def __init__(self, target: Union["State", str]):
        if isinstance(target, str):
            if not target:
                raise ValueError("Transition target name must not be empty")
            self.state = None
            self.target_name = target
        else:
            self.state = target
            self.target_name = None

    @property
    def name(self) -> str:
        """Name of the target state, read at render time so renames are followed."""
        if self.state is not None:
            return self.state.state_name
        return self.target_name


def to_transition(target: Any) -> Tuple[Transition, Tuple["State", ...]]:
    """
    Turn a transition target into a Transition plus the target's open ends.

    Args:
        target: A state, a Chain, or a state name

    Returns:
        Tuple of the Transition to the target's start state and the open ends
        the target contributes (empty for name references)
    """
    if isinstance(target, str):
        return Transition(target), ()
    start_state = getattr(target, "start_state", None)
    if start_state is None:
        raise TypeError(f"Transition target must be a state, a chain or a state name, got {type(target).__name__}")
    return Transition(start_state), tuple(target.open_ends)


class RetryPolicy:
    """One Retrier entry: which errors to retry and how."""

    def __init__(self, errors: List[str], interval_seconds: int, max_attempts: int, backoff_rate: float):
        self.errors = list(errors)
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self.backoff_rate = backoff_rate

    def to_json(self) -> Dict[str, Any]:
        return {
            "ErrorEquals": list(self.errors),
            "IntervalSeconds": self.interval_seconds,
            "MaxAttempts": self.max_attempts,
            "BackoffRate": self.backoff_rate,
        }


class CatchHandler:
    """One Catcher entry: which errors to catch and where to go."""

    def __init__(self, errors: List[str], transition: Transition, result_path: Optional[str] = None):
        self.errors = list(errors)
        self.transition = transition
        self.result_path = result_path

    def to_json(self) -> Dict[str, Any]:
        rendered = {"ErrorEquals": list(self.errors), "Next": self.transition.name}
        if self.result_path is not None:
            rendered["ResultPath"] = self.result_path
        return rendered


class State:
    """
    Base class for all state kinds.

    Subclasses set ``state_type`` and implement ``render_fields`` for their
    kind-specific JSON. ``Next``/``End``, Retry, Catch and nested sub-graphs are
    written by the ASL serializer, not by the state itself.

    Attributes:
        scope (Scope): Scope the state was defined in
        state_id (str): Id allocated in the construction scope
        path (str): Construction path, used in diagnostics
        state_name (str): Name of the state in the compiled document
        comment (Optional[str]): Free-form Comment field
        retries (List[RetryPolicy]): Retry policies in declaration order
        catches (List[CatchHandler]): Catch handlers in declaration order
    """

    state_type: StateType = None

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
    ):
        self.scope = scope
        self.state_id = scope.allocate_id(state_id)
        self.path = scope.child_path(self.state_id)
        self.state_name = state_name or self.state_id
        self.comment = comment
        self.input_path = input_path
        self.output_path = output_path
        self.next_transition: Optional[Transition] = None
        self.is_end = False
        self.retries: List[RetryPolicy] = []
        self.catches: List[CatchHandler] = []
        scope.register_state(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.state_name!r}, path={self.path!r})"

    # Chainable protocol

    @property
    def start_state(self) -> "State":
        return self

    @property
    def open_ends(self) -> Tuple["State", ...]:
        if self.state_type in TERMINAL_TYPES:
            return ()
        return (self,)

    def next(self, target: Any) -> Chain:
        """Continue with ``target`` after this state and return the resulting chain."""
        return Chain.start(self).next(target)

    def end(self) -> Chain:
        """Mark this state as the end of its branch."""
        return Chain.start(self).end()

    # Transition wiring

    def _describe_transition(self) -> Optional[str]:
        if self.next_transition is not None:
            return f"Next '{self.next_transition.name}'"
        if self.is_end:
            return "End"
        return None

    def check_can_wire(self, attempted: str) -> None:
        """Raise DoubleWiring if this state already has an outgoing transition."""
        existing = self._describe_transition()
        if existing:
            raise DoubleWiring(self.state_name, existing, attempted)
        if self.state_type in TERMINAL_TYPES:
            raise DoubleWiring(self.state_name, f"a terminal {self.state_type.value} type", attempted)

    def check_can_end(self) -> None:
        """Raise if this state cannot be marked as the end of its branch."""
        self.check_can_wire("End")

    def continuation(self) -> Optional[Transition]:
        """The transition chaining sets on this state, or None while it is still an open end."""
        return self.next_transition

    def wire_next(self, transition: Transition) -> None:
        self.check_can_wire(f"Next '{transition.name}'")
        self.next_transition = transition

    def mark_end(self) -> None:
        self.check_can_end()
        self.is_end = True

    # Error handling

    def add_retry(
        self,
        errors: Optional[List[str]] = None,
        interval_seconds: int = DEFAULT_RETRY_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_RETRY_MAX_ATTEMPTS,
        backoff_rate: float = DEFAULT_RETRY_BACKOFF_RATE,
    ) -> "State":
        """
        Append a Retry policy.

        Args:
            errors: Error names to retry on, defaults to ``States.ALL``
            interval_seconds: Seconds before the first retry
            max_attempts: Maximum number of retries, 0 disables retrying
            backoff_rate: Multiplier applied to the interval after each attempt

        Returns:
            This state, so calls can be chained

        Raises:
            InvalidStateConfiguration: If this kind cannot fail or a field is out of range
        """
        self._check_retriable("Retry")
        check_non_negative_int(self.state_name, "IntervalSeconds", interval_seconds)
        check_non_negative_int(self.state_name, "MaxAttempts", max_attempts)
        if isinstance(backoff_rate, bool) or not isinstance(backoff_rate, (int, float)) or backoff_rate < 1:
            raise InvalidStateConfiguration(self.state_name, f"BackoffRate must be a number >= 1, got {backoff_rate!r}")
        self.retries.append(RetryPolicy(errors or [Errors.ALL], interval_seconds, max_attempts, backoff_rate))
        return self

    def add_catch(self, handler: Any, errors: Optional[List[str]] = None, result_path: Optional[str] = None) -> "State":
        """
        Append a Catch handler that transitions to ``handler`` on matching errors.

        Args:
            handler: State, chain or state name to transition to
            errors: Error names to catch, defaults to ``States.ALL``
            result_path: Where to place the error output in the state input

        Returns:
            This state, so calls can be chained

        Raises:
            InvalidStateConfiguration: If this kind cannot fail
        """
        self._check_retriable("Catch")
        transition, _ = to_transition(handler)
        self.catches.append(CatchHandler(errors or [Errors.ALL], transition, result_path))
        return self

    def _check_retriable(self, what: str) -> None:
        if self.state_type not in RETRIABLE_TYPES:
            raise InvalidStateConfiguration(self.state_name, f"{self.state_type.value} states do not support {what}")

    # Graph hooks

    def outgoing_transitions(self) -> List[Tuple[str, Transition]]:
        """Every transition out of this state, as (field, transition) pairs in render order."""
        transitions = []
        if self.next_transition is not None:
            transitions.append(("Next", self.next_transition))
        for handler in self.catches:
            transitions.append(("Catch", handler.transition))
        return transitions

    def sub_graph_starts(self) -> List["State"]:
        """Start states of the nested graphs (Parallel branches, Map iterator) this state owns."""
        return []

    def validate(self) -> None:
        """
        Check the state is complete enough to compile.

        Raises:
            UnterminatedState: If a non-terminal state has neither Next nor End
        """
        if self.state_type not in TERMINAL_TYPES and self.next_transition is None and not self.is_end:
            raise UnterminatedState(self.state_name, self.path)

    # Rendering

    def render_fields(self) -> Dict[str, Any]:
        """Kind-specific fields of this state, excluding transitions and nested graphs."""
        return {}

    def render_fragment(self) -> Dict[str, Any]:
        """
        Render ``Type``, ``Comment``, the kind-specific fields and the I/O paths.

        Returns:
            Ordered dictionary fragment for the ``States`` entry of this state
        """
        fragment: Dict[str, Any] = {"Type": self.state_type.value}
        if self.comment is not None:
            fragment["Comment"] = self.comment
        fragment.update(self.render_fields())
        if self.input_path is not None:
            fragment["InputPath"] = self.input_path
        if self.output_path is not None:
            fragment["OutputPath"] = self.output_path
        return fragment
