"""Task state: invoke a resource and move on."""

from typing import Any, Dict, Optional

from ..errors import InvalidStateConfiguration
from ..policy import TaskResource
from ..scope import Scope
from .base import State, StateType, check_non_negative_int


class Task(State):
    """
    Invoke ``resource`` and continue with its result.

    The resource binding also carries the permission statements the
    execution role needs, which the permission aggregator collects.
    """

    state_type = StateType.TASK

    def __init__(
        self,
        scope: Scope,
        state_id: str,
        resource: TaskResource,
        state_name: Optional[str] = None,
        comment: Optional[str] = None,
        input_path: Optional[str] = None,
        output_path: Optional[str] = None,
        result_path: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
        timeout_seconds: Optional[int] = None,
        heartbeat_seconds: Optional[int] = None,
    ):
        super().__init__(scope, state_id, state_name, comment, input_path, output_path)
        if not isinstance(resource, TaskResource):
            raise TypeError(f"Task resource must be a TaskResource, got {type(resource).__name__}")
        self.resource = resource
        self.result_path = result_path
        self.parameters = parameters
        self.timeout_seconds = timeout_seconds
        self.heartbeat_seconds = heartbeat_seconds

    @property
    def policy_statements(self):
        return self.resource.policy_statements

    def validate(self) -> None:
        super().validate()
        if self.timeout_seconds is not None:
            check_non_negative_int(self.state_name, "TimeoutSeconds", self.timeout_seconds)
        if self.heartbeat_seconds is not None:
            check_non_negative_int(self.state_name, "HeartbeatSeconds", self.heartbeat_seconds)
            if self.timeout_seconds is not None and self.heartbeat_seconds >= self.timeout_seconds:
                raise InvalidStateConfiguration(
                    self.state_name,
                    f"HeartbeatSeconds ({self.heartbeat_seconds}) must be smaller than "
                    f"TimeoutSeconds ({self.timeout_seconds})",
                )

    def render_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"Resource": self.resource.resource_arn}
        if self.parameters is not None:
            fields["Parameters"] = self.parameters
        if self.result_path is not None:
            fields["ResultPath"] = self.result_path
        if self.timeout_seconds is not None:
            fields["TimeoutSeconds"] = self.timeout_seconds
        if self.heartbeat_seconds is not None:
            fields["HeartbeatSeconds"] = self.heartbeat_seconds
        return fields
