"""
Construction scopes.

States are defined inside a scope, which gives each of them a hierarchical
construction path (``StateMachine/Ingest/Validate``) used in diagnostics, and
allocates their default names. Ids reused in the same scope are disambiguated
with a numeric suffix, the same way the first state keeps the bare id.
"""

from typing import Any, Dict, List, Optional, Set

PATH_SEPARATOR = "/"


class Scope:
    """
    A named node in the construction tree.

    Attributes:
        scope_id (str): Id of this scope inside its parent
        parent (Optional[Scope]): Enclosing scope, None for a root
        path (str): Full construction path from the root
        defined_states (List): States defined directly in this scope, in definition order
        states_by_name (Dict): Name -> states defined under that name, in definition order
    """

    def __init__(self, scope_id: str, parent: Optional["Scope"] = None):
        if not scope_id:
            raise ValueError("Scope id must not be empty")
        if PATH_SEPARATOR in scope_id:
            raise ValueError(f"Scope id '{scope_id}' must not contain '{PATH_SEPARATOR}'")
        self.parent = parent
        self.scope_id = parent.allocate_id(scope_id) if parent is not None else scope_id
        self.path = parent.child_path(self.scope_id) if parent is not None else scope_id
        self.id_counter: Dict[str, int] = {}
        self.allocated_ids: Set[str] = set()
        self.defined_states: List[Any] = []
        self.states_by_name: Dict[str, List[Any]] = {}

    def allocate_id(self, child_id: str) -> str:
        """
        Reserve a unique child id in this scope.

        The first request for an id returns it unchanged; later requests return
        ``{child_id}_2``, ``{child_id}_3`` and so on, skipping any suffixed id
        that is already taken, including ids requested directly.

        Args:
            child_id: Requested id

        Returns:
            The id actually allocated to the child
        """
        if not child_id:
            raise ValueError(f"Child id in scope '{self.path}' must not be empty")
        candidate = child_id
        counter = self.id_counter.get(child_id, 1)
        while candidate in self.allocated_ids:
            counter += 1
            candidate = f"{child_id}_{counter}"
        self.id_counter[child_id] = counter
        self.allocated_ids.add(candidate)
        return candidate

    def register_state(self, state: Any) -> None:
        """Record a state defined in this scope."""
        self.defined_states.append(state)
        self.states_by_name.setdefault(state.state_name, []).append(state)

    def states_named(self, state_name: str) -> List[Any]:
        """Return every state defined in this scope under ``state_name``, in definition order."""
        return list(self.states_by_name.get(state_name, []))

    def child_path(self, child_id: str) -> str:
        """Return the construction path of a child with the given (allocated) id."""
        return f"{self.path}{PATH_SEPARATOR}{child_id}"

    def __repr__(self) -> str:
        return f"Scope({self.path!r})"
