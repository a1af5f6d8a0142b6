"""Pass, Succeed and Fail states."""

from typing import Any, Dict, Optional

from ..scope import Scope
from .base import State, StateType


class Pass(State):
    """Pass its input to its output, optionally injecting a fixed ``result``."""

    state_type = StateType.PASS

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
        result: Any = None,
        result_path: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(scope, state_id, state_name, comment, input_path, output_path)
        self.result = result
        self.result_path = result_path
        self.parameters = parameters

    def render_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if self.parameters is not None:
            fields["Parameters"] = self.parameters
        if self.result is not None:
            fields["Result"] = self.result
        if self.result_path is not None:
            fields["ResultPath"] = self.result_path
        return fields


class Succeed(State):
    """Stop the execution (or branch) successfully."""

    state_type = StateType.SUCCEED


class Fail(State):
    """Stop the execution with an error name and a human readable cause."""

    state_type = StateType.FAIL

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        error: Optional[str] = None,
        cause: Optional[str] = None,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
    ):
        # Fail states take no InputPath/OutputPath
        super().__init__(scope, state_id, state_name, comment)
        self.error = error
        self.cause = cause

    def render_fields(self) -> Dict[str, Any]:
        fields = {}
        if self.error is not None:
            fields["Error"] = self.error
        if self.cause is not None:
            fields["Cause"] = self.cause
        return fields
