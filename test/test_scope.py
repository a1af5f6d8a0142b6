"""
Tests for Scope
"""

import pytest

from state_graph_compiler.graph import StateGraph
from state_graph_compiler.scope import Scope
from state_graph_compiler.states import Pass


class TestScopeIds:
    """Test id allocation and construction paths."""

    def test_root_path_is_its_id(self):
        assert Scope("Root").path == "Root"

    def test_nested_path(self):
        """Nested scopes extend the parent path."""
        root = Scope("Root")
        child = Scope("Ingest", root)

        assert child.path == "Root/Ingest"
        assert child.parent is root

    def test_first_id_is_bare_and_repeats_are_suffixed(self):
        """The first request keeps the id, repeats get _2, _3."""
        scope = Scope("Root")

        assert scope.allocate_id("Step") == "Step"
        assert scope.allocate_id("Step") == "Step_2"
        assert scope.allocate_id("Step") == "Step_3"
        assert scope.allocate_id("Other") == "Other"

    def test_suffix_skips_ids_requested_directly(self):
        """A generated suffix never reuses an id that is already taken."""
        scope = Scope("Root")

        assert scope.allocate_id("Step_2") == "Step_2"
        assert scope.allocate_id("Step") == "Step"
        assert scope.allocate_id("Step") == "Step_3"

    def test_direct_request_for_a_generated_id_is_suffixed(self):
        scope = Scope("Root")
        scope.allocate_id("Step")
        scope.allocate_id("Step")

        assert scope.allocate_id("Step_2") == "Step_2_2"
        assert scope.allocate_id("Step") == "Step_3"

    def test_repeated_child_scope_gets_suffixed_path(self):
        root = Scope("Root")
        Scope("Branch", root)
        second = Scope("Branch", root)

        assert second.scope_id == "Branch_2"
        assert second.path == "Root/Branch_2"

    @pytest.mark.parametrize("scope_id", ["", "a/b"])
    def test_invalid_scope_id(self, scope_id):
        with pytest.raises(ValueError):
            Scope(scope_id)


class TestScopeStates:
    """Test state registration in a scope."""

    def test_states_get_paths_and_default_names(self):
        """States are named after their allocated id."""
        scope = Scope("Root")
        first = Pass(scope, "Step")
        second = Pass(scope, "Step")

        assert first.state_name == "Step"
        assert second.state_name == "Step_2"
        assert second.path == "Root/Step_2"
        assert scope.defined_states == [first, second]

    def test_explicit_name_overrides_id(self):
        scope = Scope("Root")
        state = Pass(scope, "Step", state_name="Prepare input")

        assert state.state_id == "Step"
        assert state.state_name == "Prepare input"

    def test_states_named(self):
        """Lookup returns every state using a name, in definition order."""
        scope = Scope("Root")
        first = Pass(scope, "A", state_name="Same")
        Pass(scope, "B")
        third = Pass(scope, "C", state_name="Same")

        assert scope.states_named("Same") == [first, third]
        assert scope.states_named("Missing") == []

    def test_repeated_and_suffix_like_ids_get_distinct_paths(self):
        """Default names stay unique, so the states compile together."""
        scope = Scope("Test")
        first = Pass(scope, "Step")
        second = Pass(scope, "Step")
        third = Pass(scope, "Step_2")

        assert [state.state_name for state in (first, second, third)] == ["Step", "Step_2", "Step_2_2"]
        assert len({first.path, second.path, third.path}) == 3
        graph = StateGraph(first.next(second).next(third).end())
        assert list(graph.states) == ["Step", "Step_2", "Step_2_2"]

    def test_states_named_uses_the_name_index(self):
        scope = Scope("Root")
        first = Pass(scope, "A", state_name="Same")

        assert scope.states_by_name == {"Same": [first]}
        assert scope.states_named("Same") is not scope.states_by_name["Same"]
