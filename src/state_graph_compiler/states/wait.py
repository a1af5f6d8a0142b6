"""Wait state: delay for a duration or until a point in time."""

from typing import Any, Dict, Optional

from ..errors import InvalidWaitSpecification
from ..scope import Scope
from .base import State, StateType, check_non_negative_int


class Wait(State):
    """
    Pause the execution.

    Exactly one of ``seconds``, ``timestamp``, ``seconds_path`` or
    ``timestamp_path`` must be given. The check runs when the graph is
    compiled, so a misconfigured Wait never reaches the document.
    """

    state_type = StateType.WAIT

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        seconds: Optional[int] = None,
        timestamp: Optional[str] = None,
        seconds_path: Optional[str] = None,
        timestamp_path: Optional[str] = None,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
    ):
        super().__init__(scope, state_id, state_name, comment, input_path, output_path)
        self.seconds = seconds
        self.timestamp = timestamp
        self.seconds_path = seconds_path
        self.timestamp_path = timestamp_path

    def _duration_fields(self) -> Dict[str, Any]:
        candidates = {
            "Seconds": self.seconds,
            "Timestamp": self.timestamp,
            "SecondsPath": self.seconds_path,
            "TimestampPath": self.timestamp_path,
        }
        return {key: value for key, value in candidates.items() if value is not None}

    def validate(self) -> None:
        super().validate()
        specified = self._duration_fields()
        if len(specified) != 1:
            raise InvalidWaitSpecification(self.state_name, list(specified))
        if self.seconds is not None:
            check_non_negative_int(self.state_name, "Seconds", self.seconds)

    def render_fields(self) -> Dict[str, Any]:
        return self._duration_fields()
