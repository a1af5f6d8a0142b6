"""
State kinds of the graph model.

Every kind is a subclass of ``State`` tagged with a ``StateType``; the ASL
serializer dispatches on that tag.
"""

from .base import Errors, State, StateType, Transition
from .choice import Choice
from .condition import Condition
from .parallel import Map, Parallel
from .simple import Fail, Pass, Succeed
from .task import Task
from .wait import Wait

__all__ = [
    "State",
    "StateType",
    "Transition",
    "Errors",
    "Condition",
    "Task",
    "Choice",
    "Wait",
    "Parallel",
    "Map",
    "Pass",
    "Succeed",
    "Fail",
]
