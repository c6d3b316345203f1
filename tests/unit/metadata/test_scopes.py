"""Tests for scope state tracking."""

from tagnav.metadata.scopes import INACTIVE, ActiveAt, ScopeTracker


class TestScopeTracker:
    """Tests for ScopeTracker transitions."""

    def test_unregistered_tag_is_inactive(self):
        """A tag never opened reports the inactive state."""
        tracker = ScopeTracker()

        assert tracker.state("a") is INACTIVE
        assert not tracker.is_active("a")
        assert dict(tracker.active()) == {}

    def test_open_and_close(self):
        """open activates a tag at a level, close deactivates it."""
        tracker = ScopeTracker()
        tracker.open("a", 2)

        assert tracker.state("a") == ActiveAt(2)
        assert tracker.is_active("a")

        tracker.close("a")

        assert tracker.state("a") is INACTIVE
        assert not tracker.is_active("a")

    def test_open_keeps_existing_level(self):
        """Opening an active tag does not move its level."""
        tracker = ScopeTracker()
        tracker.open("a", 0)
        tracker.open("a", 4)

        assert tracker.state("a") == ActiveAt(0)

    def test_open_prominent_only_lowers_level(self):
        """open_prominent replaces an active level only with a smaller one."""
        tracker = ScopeTracker()
        tracker.open_prominent("a", 3)
        tracker.open_prominent("a", 4)

        assert tracker.state("a") == ActiveAt(3)

        tracker.open_prominent("a", 1)

        assert tracker.state("a") == ActiveAt(1)

    def test_open_prominent_reopens_closed_tag(self):
        """A closed tag is reopened at any level."""
        tracker = ScopeTracker()
        tracker.open_prominent("a", 1)
        tracker.close("a")
        tracker.open_prominent("a", 5)

        assert tracker.state("a") == ActiveAt(5)

    def test_close_unknown_tag_is_noop(self):
        """Closing a tag that was never opened leaves it inactive."""
        tracker = ScopeTracker()
        tracker.close("a")

        assert tracker.state("a") is INACTIVE
        assert list(tracker.active()) == []

    def test_close_where(self):
        """close_where closes matching scopes and reports them."""
        tracker = ScopeTracker()
        tracker.open("h1", 1)
        tracker.open("h2", 2)
        tracker.open("h3", 3)

        closed = tracker.close_where(lambda level: level >= 2)

        assert sorted(closed) == ["h2", "h3"]
        assert dict(tracker.active()) == {"h1": 1}

    def test_inactive_is_singleton(self):
        """INACTIVE compares by identity."""
        from tagnav.metadata.scopes import _Inactive

        assert _Inactive() is INACTIVE
        assert repr(INACTIVE) == "INACTIVE"
