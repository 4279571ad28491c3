"""
Unit tests for validation of JSON received from remotes.
"""

import pytest

from servicecloud_do import (
    ParseError,
    PingResponse,
    RemoteAddress,
    ResolutionError,
    ServiceInformation,
    TransportError,
)
from servicecloud_do.wire import (
    parse_envelope,
    parse_ping_response,
    parse_remote_object,
    parse_service_information,
)


class TestRemoteObject:
    """Tests for parse_remote_object."""

    def test_extra_keys_ignored(self):
        remote = parse_remote_object({"address": "h", "port": 81, "weight": 3})

        assert remote == RemoteAddress("h", 81)

    def test_empty_address_fails(self):
        with pytest.raises(ParseError, match="address"):
            parse_remote_object({"address": "  "})

    def test_non_numeric_port_fails(self):
        with pytest.raises(ParseError, match="port"):
            parse_remote_object({"address": "h", "port": "eighty"})


class TestEnvelope:
    """Tests for parse_envelope."""

    def test_missing_success_is_failure(self):
        """Only an explicit success flag counts as success."""
        envelope = parse_envelope({"data": 1}, "http://h:80/")

        assert not envelope.success
        assert envelope.error_message == "Unknown error"

    def test_data_kept_as_is(self):
        data = {"rows": [1, 2]}
        envelope = parse_envelope({"success": True, "data": data}, "http://h:80/")

        assert envelope.success
        assert envelope.data == data

    def test_non_object_body_fails(self):
        with pytest.raises(TransportError, match="Malformed response envelope"):
            parse_envelope("ok", "http://h:80/")

    def test_non_string_error_fails(self):
        with pytest.raises(TransportError):
            parse_envelope({"success": False, "error": {"code": 1}}, "http://h:80/")


class TestPingResponse:
    """Tests for parse_ping_response."""

    def test_camel_case_keys(self):
        response = parse_ping_response(
            {
                "serviceName": "math",
                "actionName": "square",
                "remote": {"address": "backend", "port": 9000},
            }
        )

        assert response == PingResponse(
            found=False,
            service_name="math",
            action_name="square",
            remote=RemoteAddress("backend", 9000),
        )

    def test_snake_case_keys_accepted(self):
        response = parse_ping_response({"found": True, "service_name": "math"})

        assert response.found
        assert response.service_name == "math"

    def test_found_null_is_not_found(self):
        assert not parse_ping_response({"found": None}).found

    def test_invalid_remote_fails(self):
        """A redirect to an unusable remote cannot be followed."""
        with pytest.raises(ResolutionError, match="remote"):
            parse_ping_response({"remote": {"port": 80}})

    def test_non_object_fails(self):
        with pytest.raises(ResolutionError):
            parse_ping_response("found")


class TestServiceInformation:
    """Tests for parse_service_information."""

    def test_missing_lists_default_to_empty(self):
        assert parse_service_information({"name": "math"}) == ServiceInformation("math", [], [])

    def test_actions_must_be_names(self):
        with pytest.raises(TransportError, match="actions"):
            parse_service_information({"name": "math", "actions": [{"name": "square"}]})
