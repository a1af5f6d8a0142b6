"""
State Graph Compiler

Compiles chains of Step Functions states (Task, Choice, Wait, Parallel, Map,
Pass, Succeed, Fail) into a validated Amazon States Language document, plus
the permission statements the states' resources need at execution time.

Main Components:
- states: The state node model, one class per state kind, and Choice conditions.
- chain: Fluent linking of states into chains with open ends.
- graph: Traversal and validation of the reachable state graph.
- transform: ASL serialization and permission aggregation.
- state_machine: Wrapper pairing a compiled definition with its execution role.
- visualizer: Terminal rendering of compiled documents.

Usage:
    from state_graph_compiler import Scope, StateGraph, Task, lambda_function_resource

    scope = Scope("MyStateMachine")
    first = Task(scope, "TaskA", lambda_function_resource(function_arn))
    second = Task(scope, "TaskB", lambda_function_resource(function_arn))
    graph = StateGraph(first.next(second).end(), "My graph")
    document = graph.to_graph_json()
"""

# Version information
__version__ = "1.0.0"
__description__ = "Step Functions state graph compiler"

from .chain import Chain
from .errors import (
    DoubleWiring,
    DuplicateStateName,
    EmptyStartState,
    InvalidStateConfiguration,
    InvalidWaitSpecification,
    StateGraphError,
    UnresolvedTransition,
    UnterminatedState,
)
from .graph import StateGraph
from .policy import (
    PolicyStatement,
    TaskResource,
    activity_resource,
    lambda_function_resource,
    policy_document,
    sns_publish_resource,
    sqs_send_message_resource,
)
from .scope import Scope
from .state_machine import StateMachine
from .states import Choice, Condition, Errors, Fail, Map, Parallel, Pass, State, StateType, Succeed, Task, Wait
from .transform import AslSerializer, PolicyAggregator
from .visualizer import GraphVisualizer

# Public API
__all__ = [
    # Package metadata
    "__version__",
    "__description__",
    # Construction
    "Scope",
    "Chain",
    # States
    "State",
    "StateType",
    "Task",
    "Choice",
    "Condition",
    "Wait",
    "Parallel",
    "Map",
    "Pass",
    "Succeed",
    "Fail",
    "Errors",
    # Compilation
    "StateGraph",
    "AslSerializer",
    "PolicyAggregator",
    "StateMachine",
    # Permissions
    "PolicyStatement",
    "TaskResource",
    "lambda_function_resource",
    "activity_resource",
    "sns_publish_resource",
    "sqs_send_message_resource",
    "policy_document",
    # Errors
    "StateGraphError",
    "DuplicateStateName",
    "UnresolvedTransition",
    "InvalidWaitSpecification",
    "DoubleWiring",
    "EmptyStartState",
    "UnterminatedState",
    "InvalidStateConfiguration",
    # Visualizer
    "GraphVisualizer",
]

# Package-level configuration
import logging

# Set up package-level logging
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())  # Prevent "No handlers" warnings


def get_package_info():
    """Get information about the package and available components."""
    info = {
        "version": __version__,
        "description": __description__,
        "public_api": __all__,
    }
    return info
