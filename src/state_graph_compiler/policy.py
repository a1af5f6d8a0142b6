"""
Permission statements and Task resource bindings.

A Task state points at a resource (Lambda function, activity, service
integration). Besides the ARN written into the ``Resource`` field, the resource
declares the permission statements the execution role needs to invoke it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

ALLOW = "Allow"
DENY = "Deny"


@dataclass(frozen=True)
class PolicyStatement:
    """
    An access-control record required at execution time.

    Statements compare equal when effect, actions and resources are identical
    (in the same order), which is what the permission aggregator deduplicates on.
    """

    actions: tuple = ()
    resources: tuple = ()
    effect: str = ALLOW

    def __post_init__(self):
        if self.effect not in (ALLOW, DENY):
            raise ValueError(f"Policy statement effect must be '{ALLOW}' or '{DENY}', got '{self.effect}'")
        # Accept lists from callers but keep the record hashable
        object.__setattr__(self, "actions", tuple(self.actions))
        object.__setattr__(self, "resources", tuple(self.resources))

    def to_dict(self) -> Dict[str, Any]:
        """Return the statement as a plain ``{effect, actions, resources}`` record."""
        return {
            "effect": self.effect,
            "actions": list(self.actions),
            "resources": list(self.resources),
        }

    def to_iam_json(self) -> Dict[str, Any]:
        """Return the statement in IAM policy document form."""
        return {
            "Effect": self.effect,
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }


@dataclass(frozen=True)
class TaskResource:
    """What a Task state invokes, and the permissions needed to invoke it."""

    resource_arn: str
    policy_statements: tuple = field(default=())

    def __post_init__(self):
        if not self.resource_arn:
            raise ValueError("Task resource ARN must not be empty")
        object.__setattr__(self, "policy_statements", tuple(self.policy_statements))


def lambda_function_resource(function_arn: str) -> TaskResource:
    """Bind a Task to a Lambda function; the role needs ``lambda:InvokeFunction`` on it."""
    return TaskResource(
        resource_arn=function_arn,
        policy_statements=[PolicyStatement(actions=["lambda:InvokeFunction"], resources=[function_arn])],
    )


def activity_resource(activity_arn: str) -> TaskResource:
    """Bind a Task to an activity. Workers poll activities, so the role needs nothing."""
    return TaskResource(resource_arn=activity_arn)


def sns_publish_resource(topic_arn: str) -> TaskResource:
    """Bind a Task to the SNS publish service integration for ``topic_arn``."""
    return TaskResource(
        resource_arn="arn:aws:states:::sns:publish",
        policy_statements=[PolicyStatement(actions=["sns:Publish"], resources=[topic_arn])],
    )


def sqs_send_message_resource(queue_arn: str) -> TaskResource:
    """Bind a Task to the SQS send-message service integration for ``queue_arn``."""
    return TaskResource(
        resource_arn="arn:aws:states:::sqs:sendMessage",
        policy_statements=[PolicyStatement(actions=["sqs:SendMessage"], resources=[queue_arn])],
    )


def policy_document(statements: Iterable[PolicyStatement]) -> Dict[str, Any]:
    """Wrap statements into an IAM policy document."""
    rendered: List[Dict[str, Any]] = [statement.to_iam_json() for statement in statements]
    return {"Version": "2012-10-17", "Statement": rendered}
