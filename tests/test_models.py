"""
Tests for the parse outcome models.
"""
import pytest
from pydantic import ValidationError

from munin_protocol.exceptions import GrammarMismatch
from munin_protocol.models import (
    UNKNOWN,
    BannerResponse,
    Command,
    FetchResponse,
    NodeListResponse,
    ParseFailure,
    PluginListResponse,
    Request,
    ResponseRecord,
)


class TestRequest:
    """Tests for the Request record."""

    def test_is_immutable(self):
        request = Request(command=Command.NODES, statement="nodes")
        with pytest.raises(ValidationError):
            request.statement = "quit"

    def test_arguments_default_to_empty(self):
        request = Request(command=Command.NODES, statement="nodes")
        assert request.fields()["arguments"] == []

    def test_raise_for_failure_is_noop(self):
        Request(command=Command.HELP, statement="help").raise_for_failure()


class TestParseFailure:
    """Tests for the failure variant."""

    def test_from_error_and_back(self):
        error = GrammarMismatch(
            "banner: expected '#' at position 0",
            grammar="banner",
            text="munin node at x",
            position=0,
            expected="'#'",
        )
        failure = ParseFailure.from_error(error)

        assert not failure.is_ok()
        assert failure.as_text() == "banner: expected '#' at position 0"
        assert failure.fields()["grammar"] == "banner"

        raised = failure.to_error()
        assert isinstance(raised, GrammarMismatch)
        assert raised.position == 0
        assert raised.expected == "'#'"
        assert raised.details["grammar"] == "banner"

    def test_raise_for_failure(self):
        failure = ParseFailure(grammar="request", text="lsit", reason="bad")
        with pytest.raises(GrammarMismatch):
            failure.raise_for_failure()


class TestResponseRecords:
    """Tests for the text rendering of response records."""

    def test_banner_text(self):
        assert str(BannerResponse(node="a.example.com")) == "a.example.com"

    def test_list_texts(self):
        assert NodeListResponse(nodes=["a", "b"]).as_text() == "a b"
        assert PluginListResponse().as_text() == ""

    def test_fetch_fields_keep_unknown(self):
        record = FetchResponse(values={"load": UNKNOWN, "users": 3})
        assert record.fields() == {"values": {"load": "unknown", "users": 3}}
        assert record.as_text() == "load=unknown users=3"

    def test_kind(self):
        assert BannerResponse.kind == "banner"
        assert FetchResponse.kind == "fetch"

    def test_base_record_renders_empty_text(self):
        record = ResponseRecord()
        assert record.as_text() == ""
        assert str(record) == ""
        assert record.is_ok()
