"""Choice state: branch on conditions over the state input."""

from typing import Any, List, Optional, Tuple

from ..chain import Chain
from ..errors import DoubleWiring, InvalidStateConfiguration
from ..scope import Scope
from .base import TERMINAL_TYPES, State, StateType, Transition, to_transition
from .condition import Condition


class ChoiceRule:
    """A condition paired with the state to go to when it matches."""

    def __init__(self, condition: Condition, transition: Transition):
        self.condition = condition
        self.transition = transition


class Choice(State):
    """
    Pick the first rule whose condition matches, otherwise take the default.

    A Choice has no ``Next``/``End`` of its own. Chaining a Choice as an open
    end sets its default; ``afterwards()`` gives back a chain over the open
    ends of every branch so they can converge on one continuation.
    """

    state_type = StateType.CHOICE

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
    ):
        super().__init__(scope, state_id, state_name, comment, input_path, output_path)
        self.rules: List[ChoiceRule] = []
        self.default: Optional[Transition] = None
        self.branch_tails: List[State] = []

    def when(self, condition: Condition, target: Any) -> "Choice":
        """
        Append a rule: go to ``target`` when ``condition`` matches.

        Args:
            condition: Condition over the state input
            target: State, chain or state name

        Returns:
            This Choice, so rules can be chained
        """
        if not isinstance(condition, Condition):
            raise TypeError(f"Choice rule needs a Condition, got {type(condition).__name__}")
        transition, open_ends = to_transition(target)
        self.rules.append(ChoiceRule(condition, transition))
        self._collect_open_ends(open_ends)
        return self

    def otherwise(self, target: Any) -> "Choice":
        """
        Set the default transition taken when no rule matches.

        Raises:
            DoubleWiring: If a default is already set
        """
        transition, open_ends = to_transition(target)
        self.wire_next(transition)
        self._collect_open_ends(open_ends)
        return self

    def afterwards(self) -> Chain:
        """
        Return a chain over the open ends of all branches.

        Each branch is followed from where it ended when it was attached,
        through any Next wired since, to the states still unwired. Branches
        that ended or reached a terminal state contribute nothing. Without a
        default the Choice itself stays an open end, so chaining the result
        also gives the Choice a default.
        """
        open_ends: List[State] = []
        seen = {id(self)}
        stack: List[State] = list(reversed(self.branch_tails))
        while stack:
            state = stack.pop()
            if id(state) in seen:
                continue
            seen.add(id(state))
            if state.is_end or state.state_type in TERMINAL_TYPES:
                continue
            continuation = state.continuation()
            if continuation is None:
                open_ends.append(state)
            elif continuation.state is not None:
                stack.append(continuation.state)
        if self.default is None:
            open_ends.append(self)
        return Chain(self, tuple(open_ends))

    def _collect_open_ends(self, open_ends: Tuple[State, ...]) -> None:
        for state in open_ends:
            if state not in self.branch_tails:
                self.branch_tails.append(state)

    # A chained Choice delegates to its default

    def continuation(self) -> Optional[Transition]:
        return self.default

    def check_can_wire(self, attempted: str) -> None:
        if self.default is not None:
            raise DoubleWiring(self.state_name, f"Default '{self.default.name}'", attempted)

    def check_can_end(self) -> None:
        raise InvalidStateConfiguration(
            self.state_name, "Choice states cannot be marked as End; give them a default with otherwise()"
        )

    def wire_next(self, transition: Transition) -> None:
        self.check_can_wire(f"Default '{transition.name}'")
        self.default = transition

    def outgoing_transitions(self) -> List[Tuple[str, Transition]]:
        transitions = [("Choices", rule.transition) for rule in self.rules]
        if self.default is not None:
            transitions.append(("Default", self.default))
        return transitions

    def validate(self) -> None:
        if not self.rules:
            raise InvalidStateConfiguration(self.state_name, "Choice must have at least one rule")
