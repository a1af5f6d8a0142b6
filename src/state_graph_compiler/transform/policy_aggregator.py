"""
Permission aggregation over a state graph.

Walks every state of a graph (nested branches and iterators included) once and
collects the permission statements their resources need, dropping exact
duplicates and keeping first-seen order. Nothing is attached to any role here;
the caller decides what to do with the list.
"""

import logging
from typing import Any, List

from ..policy import PolicyStatement

logger = logging.getLogger(__name__)


class PolicyAggregator:
    """Collects the deduplicated permission statements of a graph."""

    def aggregate(self, graph: Any) -> List[PolicyStatement]:
        """
        Merge the statements of every state that declares a resource dependency.

        Args:
            graph: A StateGraph; it is validated on first access

        Returns:
            Statements in first-seen order, each distinct (effect, actions, resources) once
        """
        statements: List[PolicyStatement] = []
        seen = set()
        for state in graph.all_states:
            for statement in getattr(state, "policy_statements", ()):
                if statement in seen:
                    continue
                seen.add(statement)
                statements.append(statement)
        logger.debug("Collected %d policy statement(s) for %s", len(statements), graph.graph_label)
        return statements
