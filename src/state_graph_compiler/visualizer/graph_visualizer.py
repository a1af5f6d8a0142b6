"""
Graph Visualizer

Renders a compiled Amazon States Language document as an ASCII tree: one line
per state in document order with its type and transitions, and the nested
documents of Parallel branches and Map iterators indented beneath their owner.
"""

from typing import Any, Dict, List, Optional

from .base import BaseVisualizer, Colors, Icons

_TYPE_STYLES = {
    "Task": (Colors.TASK, Icons.TASK),
    "Choice": (Colors.CHOICE, Icons.CHOICE),
    "Wait": (Colors.WAIT, Icons.WAIT),
    "Parallel": (Colors.PARALLEL, Icons.PARALLEL),
    "Map": (Colors.MAP, Icons.MAP),
    "Pass": (Colors.PASS, Icons.PASS),
    "Succeed": (Colors.SUCCEED, Icons.SUCCEED),
    "Fail": (Colors.FAIL, Icons.FAIL),
}


class GraphVisualizer(BaseVisualizer):
    """Visualizes compiled state machine documents as trees."""

    def visualize(self, document: Dict[str, Any], title: Optional[str] = None) -> str:
        """
        Render a compiled document.

        Args:
            document: Dictionary with StartAt and States, as produced by the serializer
            title: Optional heading line

        Returns:
            The rendered tree as a string
        """
        lines: List[str] = []
        heading = title or f"Start at {document['StartAt']}"
        lines.append(self._iconize(Icons.GRAPH) + self._colorize(heading, Colors.GRAPH_TITLE))
        if "TimeoutSeconds" in document:
            lines.append(self._colorize(f"Timeout: {document['TimeoutSeconds']}s", Colors.DESCRIPTION))
        self._render_states(document["States"], "", lines)
        return "\n".join(lines)

    def _render_states(self, states: Dict[str, Any], prefix: str, lines: List[str]) -> None:
        names = list(states)
        for position, name in enumerate(names):
            is_last = position == len(names) - 1
            state = states[name]
            lines.append(f"{prefix}{self._connector(is_last)} {self._describe_state(name, state)}")

            child_prefix = self._child_prefix(prefix, is_last)
            nested = self._nested_documents(state)
            for index, (label, nested_document) in enumerate(nested):
                nested_is_last = index == len(nested) - 1
                lines.append(
                    f"{child_prefix}{self._connector(nested_is_last)} {self._iconize(Icons.BRANCH)}"
                    f"{self._colorize(label, Colors.DESCRIPTION)} (start at {nested_document['StartAt']})"
                )
                self._render_states(
                    nested_document["States"], self._child_prefix(child_prefix, nested_is_last), lines
                )

    def _describe_state(self, name: str, state: Dict[str, Any]) -> str:
        state_type = state["Type"]
        color, icon = _TYPE_STYLES.get(state_type, (Colors.RESET, ""))
        parts = [f"{self._iconize(icon)}{self._colorize(name, color)} [{state_type}]"]

        if state_type == "Choice":
            targets = [rule["Next"] for rule in state.get("Choices", [])]
            parts.append(self._colorize(f"→ {', '.join(targets)}", Colors.TRANSITION))
            if "Default" in state:
                parts.append(self._colorize(f"(default → {state['Default']})", Colors.TRANSITION))
        elif "Next" in state:
            parts.append(self._colorize(f"→ {state['Next']}", Colors.TRANSITION))
        elif state.get("End"):
            parts.append(Icons.END if self.use_icons else "(end)")

        for catch in state.get("Catch", []):
            errors = ", ".join(catch["ErrorEquals"])
            parts.append(self._colorize(f"{self._iconize(Icons.CATCH)}{errors} → {catch['Next']}", Colors.DESCRIPTION))
        if state.get("Retry"):
            parts.append(self._colorize(f"(retry x{len(state['Retry'])})", Colors.DESCRIPTION))
        return " ".join(parts)

    def _nested_documents(self, state: Dict[str, Any]) -> List[tuple]:
        if state["Type"] == "Parallel":
            return [(f"Branch {index}", branch) for index, branch in enumerate(state.get("Branches", []), start=1)]
        if state["Type"] == "Map" and "Iterator" in state:
            return [("Iterator", state["Iterator"])]
        return []
