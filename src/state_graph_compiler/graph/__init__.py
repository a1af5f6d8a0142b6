"""
Graph package: traversal and validation of chained states.
"""

from .state_graph import StateGraph

__all__ = ["StateGraph"]
