"""
Tests for SessionState.
"""
from munin_protocol.engine.session_state import SessionState
from munin_protocol.models import BANNER, SessionSnapshot


class TestSessionState:
    """Tests for SessionState basic operations."""

    def test_defaults(self):
        state = SessionState()
        assert state.pending_request == BANNER
        assert state.node == ""
        assert state.nodes == []
        assert state.capabilities == []
        assert state.last_response == ""

    def test_record_request(self):
        state = SessionState()
        state.record_request("nodes")
        assert state.pending_request == "nodes"

    def test_set_nodes_copies_input(self):
        state = SessionState()
        nodes = ["a.example.com"]
        state.set_nodes(nodes)
        nodes.append("b.example.com")
        assert state.nodes == ["a.example.com"]

    def test_has_capability(self):
        state = SessionState()
        assert not state.has_capability("dirtyconfig")
        state.set_capabilities(["multigraph", "dirtyconfig"])
        assert state.has_capability("dirtyconfig")

    def test_instances_do_not_share_lists(self):
        first = SessionState()
        second = SessionState()
        first.nodes.append("a.example.com")
        assert second.nodes == []


class TestSessionSnapshot:
    """Tests for snapshot()."""

    def test_snapshot_matches_state(self):
        state = SessionState()
        state.set_node("test1.example.com")
        state.set_capabilities(["multigraph"])
        state.record_response("cap multigraph\n")

        snapshot = state.snapshot()

        assert isinstance(snapshot, SessionSnapshot)
        assert snapshot.node == "test1.example.com"
        assert snapshot.capabilities == ["multigraph"]
        assert snapshot.last_response == "cap multigraph\n"
        assert snapshot.pending_request == BANNER

    def test_snapshot_is_detached(self):
        state = SessionState()
        state.set_nodes(["a.example.com"])
        snapshot = state.snapshot()

        state.set_nodes(["b.example.com"])

        assert snapshot.nodes == ["a.example.com"]
        assert state.nodes == ["b.example.com"]
