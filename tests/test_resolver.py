"""
Unit tests for ping/redirect resolution.

Tests cover:
- TTL exhaustion and its guard against cycles
- One-hop termination on found and on self-description
- Redirect chains and renamed services/actions
- Error propagation
"""

import pytest

from servicecloud_do import (
    ApplicationError,
    RemoteAddress,
    ResolutionError,
    ResolveOptions,
    TransportError,
    TTLExpiredError,
    configure,
    resolve,
)

from .mock_server import ScriptedTransport, ok


class TestTtl:
    """TTL handling."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl", [0, -1])
    async def test_exhausted_ttl_fails_without_transport_call(self, mesh, ttl):
        """A spent budget fails before any ping is sent."""
        with pytest.raises(TTLExpiredError) as exc_info:
            await resolve("svc", "act", "http://h1", ResolveOptions(ttl=ttl), transport=mesh.transport)

        assert str(exc_info.value) == "TTL expired"
        assert mesh.transport.calls == []

    @pytest.mark.asyncio
    async def test_cycle_fails_after_exactly_ttl_hops(self, mesh):
        """Two remotes pointing at each other exhaust the budget."""
        mesh.redirect("http://a:80", "svc", "act", {"address": "b"})
        mesh.redirect("http://b:80", "svc", "act", {"address": "a"})

        with pytest.raises(TTLExpiredError):
            await resolve("svc", "act", "http://a", ResolveOptions(ttl=5), transport=mesh.transport)

        assert mesh.transport.urls == [
            "http://a:80/",
            "http://b:80/",
            "http://a:80/",
            "http://b:80/",
            "http://a:80/",
        ]
        assert [p["ttl"] for p in mesh.transport.payloads] == [4, 3, 2, 1, 0]

    @pytest.mark.asyncio
    async def test_default_ttl_from_configuration(self, mesh):
        """Without options the configured TTL applies."""
        configure(ttl=3)
        mesh.redirect("http://a:80", "svc", "act", {"address": "b"})
        mesh.redirect("http://b:80", "svc", "act", {"address": "a"})

        with pytest.raises(TTLExpiredError):
            await resolve("svc", "act", "http://a", transport=mesh.transport)

        assert len(mesh.transport.calls) == 3

    @pytest.mark.asyncio
    async def test_default_ttl_is_one_hundred(self, mesh):
        """The first ping carries the default budget minus one."""
        mesh.authoritative("http://h1:80")

        await resolve("svc", "act", "http://h1", transport=mesh.transport)

        assert mesh.transport.payloads[0]["ttl"] == 99


class TestConvergence:
    """One-hop and multi-hop convergence."""

    @pytest.mark.asyncio
    async def test_found_terminates_in_one_hop(self, mesh):
        """found=true accepts the queried remote, normalized."""
        mesh.authoritative("http://h1:80")

        resolution = await resolve("svc", "act", "http://h1", transport=mesh.transport)

        assert mesh.transport.calls == [
            ("http://h1:80/", {"type": "ping", "serviceName": "svc", "actionName": "act", "ttl": 99}),
        ]
        assert resolution.service_name == "svc"
        assert resolution.action_name == "act"
        assert resolution.remote == RemoteAddress("h1", 80, "http:", "")

    @pytest.mark.asyncio
    async def test_self_description_terminates_in_one_hop(self, mesh):
        """An echo of the query with equivalent remote is authoritative."""
        mesh.redirect(
            "http://h1:80",
            "svc",
            "act",
            {"address": "h1", "port": 80, "protocol": "http:", "path": ""},
        )

        resolution = await resolve("svc", "act", "http://h1", transport=mesh.transport)

        assert len(mesh.transport.calls) == 1
        assert resolution.remote == RemoteAddress("h1", 80, "http:", "")

    @pytest.mark.asyncio
    async def test_echo_with_other_action_is_followed(self, mesh):
        """Self-description only counts when every part matches."""
        mesh.route(
            "http://h1:80/",
            lambda payload: ok(
                {"found": True} if payload["actionName"] == "other"
                else {"serviceName": "svc", "actionName": "other", "remote": {"address": "h1"}}
            ),
        )

        resolution = await resolve("svc", "act", "http://h1", transport=mesh.transport)

        assert len(mesh.transport.calls) == 2
        assert resolution.action_name == "other"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hops", [1, 2, 4])
    async def test_redirect_chain_takes_n_plus_one_calls(self, mesh, hops):
        """n redirects then found resolves in n+1 pings."""
        for i in range(hops):
            mesh.redirect(f"http://h{i}:80", "svc", "act", {"address": f"h{i + 1}"})
        mesh.authoritative(f"http://h{hops}:80")

        resolution = await resolve(
            "svc", "act", "http://h0", ResolveOptions(ttl=10), transport=mesh.transport
        )

        assert len(mesh.transport.calls) == hops + 1
        assert [p["ttl"] for p in mesh.transport.payloads] == list(range(9, 9 - hops - 1, -1))
        assert resolution.remote == RemoteAddress(f"h{hops}", 80, "http:", "")

    @pytest.mark.asyncio
    async def test_chain_needs_one_ttl_unit_per_ping(self, mesh):
        """A budget equal to the chain length still converges."""
        mesh.redirect("http://h0:80", "svc", "act", {"address": "h1"})
        mesh.authoritative("http://h1:80")

        resolution = await resolve("svc", "act", "http://h0", ResolveOptions(ttl=2), transport=mesh.transport)

        assert resolution.remote.address == "h1"

        mesh.transport.calls.clear()
        with pytest.raises(TTLExpiredError):
            await resolve("svc", "act", "http://h0", ResolveOptions(ttl=1), transport=mesh.transport)
        assert len(mesh.transport.calls) == 1

    @pytest.mark.asyncio
    async def test_redirect_renames_service_and_action(self, mesh):
        """Later pings and the result use the names the redirect gave."""
        mesh.redirect("http://proxy:80", "math-v2", "pow2", {"address": "backend", "port": 9000})
        mesh.authoritative("http://backend:9000")

        resolution = await resolve("math", "square", "http://proxy", transport=mesh.transport)

        second = mesh.transport.payloads[1]
        assert second["serviceName"] == "math-v2"
        assert second["actionName"] == "pow2"
        assert resolution.service_name == "math-v2"
        assert resolution.action_name == "pow2"
        assert resolution.remote == RemoteAddress("backend", 9000, "http:", "")

    @pytest.mark.asyncio
    async def test_redirect_without_service_name_keeps_current_name(self, mesh):
        """A null serviceName in a redirect leaves the service name as it was."""
        mesh.redirect("http://proxy:80", None, "pow2", {"address": "backend", "port": 9000})
        mesh.authoritative("http://backend:9000")

        resolution = await resolve("math", "square", "http://proxy", transport=mesh.transport)

        second = mesh.transport.payloads[1]
        assert second["serviceName"] == "math"
        assert second["actionName"] == "pow2"
        assert resolution.service_name == "math"
        assert resolution.action_name == "pow2"

    @pytest.mark.asyncio
    async def test_identify_only_sends_null_action(self, mesh):
        """Resolving without an action asks the remote to identify the service."""
        mesh.authoritative("http://h1:80")

        resolution = await resolve("svc", None, "http://h1", transport=mesh.transport)

        assert mesh.transport.payloads[0]["actionName"] is None
        assert resolution.action_name is None


class TestResolverErrors:
    """Error propagation."""

    @pytest.mark.asyncio
    async def test_transport_error_propagates_unchanged(self):
        """The transport's exception reaches the caller as-is."""
        error = TransportError("Error 503 - Service Unavailable", status=503)
        transport = ScriptedTransport(lambda url, payload: error)

        with pytest.raises(TransportError) as exc_info:
            await resolve("svc", "act", "http://h1", transport=transport)

        assert exc_info.value is error
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_application_error_on_ping_propagates(self, mesh):
        """A failed envelope on a ping is an application error."""
        with pytest.raises(ApplicationError) as exc_info:
            await resolve("svc", "act", "http://nowhere", transport=mesh.transport)

        assert "No route" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_authoritative_without_remote_fails(self, mesh):
        """A response that neither confirms nor redirects cannot be followed."""
        mesh.route("http://h1:80/", lambda payload: ok({"found": False}))

        with pytest.raises(ResolutionError):
            await resolve("svc", "act", "http://h1", transport=mesh.transport)

    @pytest.mark.asyncio
    async def test_malformed_ping_payload_fails(self, mesh):
        """A ping answer must be an object."""
        mesh.route("http://h1:80/", lambda payload: ok(["not", "an", "object"]))

        with pytest.raises(ResolutionError):
            await resolve("svc", "act", "http://h1", transport=mesh.transport)
