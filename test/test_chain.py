"""
Tests for Chain
"""

import pytest

from state_graph_compiler.chain import Chain
from state_graph_compiler.errors import DoubleWiring, InvalidStateConfiguration
from state_graph_compiler.scope import Scope
from state_graph_compiler.states import Choice, Condition, Pass, Succeed


@pytest.fixture
def scope():
    """Create a fresh construction scope."""
    return Scope("Test")


@pytest.fixture
def condition():
    return Condition.string_equals("$.kind", "a")


class TestChainStart:
    """Test Chain.start and Chain.sequence."""

    def test_start_from_state(self, scope):
        """A chain started from a state has that state as start and only open end."""
        a = Pass(scope, "A")

        chain = Chain.start(a)

        assert chain.start_state is a
        assert chain.open_ends == (a,)

    def test_start_from_terminal_state_has_no_open_ends(self, scope):
        """Succeed states cannot be continued."""
        done = Succeed(scope, "Done")

        assert Chain.start(done).open_ends == ()

    def test_sequence(self, scope):
        """Chain.sequence links two chainables."""
        a = Pass(scope, "A")
        b = Pass(scope, "B")

        chain = Chain.sequence(a, b)

        assert chain.start_state is a
        assert chain.open_ends == (b,)
        assert a.next_transition.state is b


class TestChainNext:
    """Test Chain.next wiring."""

    def test_next_wires_every_open_end(self, scope, condition):
        """All open ends point at the start of the target."""
        route = Choice(scope, "Route")
        left = Pass(scope, "Left")
        right = Pass(scope, "Right")
        join = Pass(scope, "Join")
        route.when(condition, left).otherwise(right)

        chain = route.afterwards().next(join)

        assert left.next_transition.state is join
        assert right.next_transition.state is join
        assert chain.start_state is route
        assert chain.open_ends == (join,)

    def test_next_returns_new_chain(self, scope):
        """Linking never mutates the original chain value."""
        a = Pass(scope, "A")
        b = Pass(scope, "B")
        first = Chain.start(a)

        second = first.next(b)

        assert second is not first
        assert first.open_ends == (a,)
        assert second.open_ends == (b,)

    def test_next_takes_open_ends_of_target_chain(self, scope):
        """Chaining to a chain continues from that chain's open ends."""
        a = Pass(scope, "A")
        b = Pass(scope, "B")
        c = Pass(scope, "C")

        chain = Chain.start(a).next(b.next(c))

        assert a.next_transition.state is b
        assert chain.open_ends == (c,)

    def test_double_wiring_raises(self, scope):
        """Setting Next twice is reported, not overwritten."""
        a = Pass(scope, "A")
        b = Pass(scope, "B")
        c = Pass(scope, "C")
        a.next(b)

        with pytest.raises(DoubleWiring, match="already has Next 'B'"):
            a.next(c)
        assert a.next_transition.state is b

    def test_double_wiring_leaves_other_open_ends_untouched(self, scope, condition):
        """Wiring is all-or-nothing across open ends."""
        route = Choice(scope, "Route")
        free = Pass(scope, "Free")
        taken = Pass(scope, "Taken")
        elsewhere = Pass(scope, "Elsewhere")
        join = Pass(scope, "Join")
        route.when(condition, free).otherwise(taken)
        chain = route.afterwards()
        taken.next(elsewhere)

        with pytest.raises(DoubleWiring):
            chain.next(join)

        assert free.next_transition is None

    def test_next_after_end_raises(self, scope):
        """A chain whose ends are all terminal cannot be continued."""
        a = Pass(scope, "A")
        b = Pass(scope, "B")
        ended = Chain.start(a).end()

        assert ended.open_ends == ()
        with pytest.raises(DoubleWiring, match="no open ends"):
            ended.next(b)

    def test_next_on_terminal_state_raises(self, scope):
        """Succeed states never get a Next."""
        done = Succeed(scope, "Done")

        with pytest.raises(DoubleWiring):
            done.next(Pass(scope, "After"))

    def test_next_with_state_name(self, scope):
        """A name reference is wired as-is and leaves no open ends."""
        a = Pass(scope, "A")

        chain = Chain.start(a).next("Elsewhere")

        assert a.next_transition.name == "Elsewhere"
        assert a.next_transition.state is None
        assert chain.open_ends == ()

    def test_choice_open_end_gets_default(self, scope):
        """Chaining a Choice open end sets its default rather than a Next."""
        route = Choice(scope, "Route")
        fallback = Pass(scope, "Fallback")

        Chain.start(route).next(fallback)

        assert route.default.state is fallback
        assert route.next_transition is None

    def test_choice_default_set_twice_raises(self, scope):
        """A second default is double wiring."""
        route = Choice(scope, "Route")
        route.otherwise(Pass(scope, "First"))

        with pytest.raises(DoubleWiring, match="Default 'First'"):
            Chain.start(route).next(Pass(scope, "Second"))

    def test_invalid_target_type_raises(self, scope):
        """Only states, chains and names can be targets."""
        with pytest.raises(TypeError):
            Chain.start(Pass(scope, "A")).next(42)


class TestChainEnd:
    """Test Chain.end terminal marking."""

    def test_end_marks_every_open_end(self, scope, condition):
        """Every open end becomes End."""
        route = Choice(scope, "Route")
        left = Pass(scope, "Left")
        right = Pass(scope, "Right")
        route.when(condition, left).otherwise(right)

        chain = route.afterwards().end()

        assert left.is_end and right.is_end
        assert chain.open_ends == ()

    def test_end_on_choice_raises(self, scope, condition):
        """Choice states delegate through their rules and cannot be End."""
        route = Choice(scope, "Route")
        route.when(condition, Pass(scope, "Left"))

        with pytest.raises(InvalidStateConfiguration):
            Chain.start(route).end()

    def test_end_twice_raises(self, scope):
        """Ending an already ended state is double wiring."""
        a = Pass(scope, "A")
        a.end()

        with pytest.raises(DoubleWiring, match="already has End"):
            a.end()

    def test_next_after_state_end_raises(self, scope):
        """Next cannot be added to a state marked End."""
        a = Pass(scope, "A")
        a.end()

        with pytest.raises(DoubleWiring):
            a.next(Pass(scope, "B"))


class TestChoiceAfterwards:
    """Test the open ends of Choice.afterwards."""

    def test_branch_extended_after_when(self, scope, condition):
        """Wiring added to a branch after when() moves its open end forward."""
        route = Choice(scope, "Route")
        a = Pass(scope, "A")
        b = Pass(scope, "B")
        other = Pass(scope, "Other")
        join = Pass(scope, "Join")
        route.when(Condition.is_present("$.x"), a).otherwise(other)
        a.next(b)

        chain = route.afterwards().next(join)

        assert a.next_transition.state is b
        assert b.next_transition.state is join
        assert other.next_transition.state is join
        assert chain.open_ends == (join,)

    def test_open_ends_in_first_seen_order(self, scope, condition):
        route = Choice(scope, "Route")
        a = Pass(scope, "A")
        b = Pass(scope, "B")
        c = Pass(scope, "C")
        route.when(condition, a).when(condition, c).otherwise(b)
        a.next(b)

        assert route.afterwards().open_ends == (b, c)

    def test_ended_and_terminal_branches_are_skipped(self, scope, condition):
        route = Choice(scope, "Route")
        ended = Pass(scope, "Ended")
        done = Succeed(scope, "Done")
        open_branch = Pass(scope, "Open")
        route.when(condition, ended).when(condition, done).otherwise(open_branch)
        ended.end()

        assert route.afterwards().open_ends == (open_branch,)

    def test_branch_looping_back_to_choice(self, scope, condition):
        """A branch wired back to the Choice leaves no open end of its own."""
        route = Choice(scope, "Route")
        retry = Pass(scope, "Retry")
        route.when(condition, retry)
        retry.next(route)

        assert route.afterwards().open_ends == (route,)

    def test_branch_wired_by_name(self, scope, condition):
        route = Choice(scope, "Route")
        a = Pass(scope, "A")
        route.when(condition, a).otherwise(Succeed(scope, "Done"))
        a.next("Elsewhere")

        assert route.afterwards().open_ends == ()
