"""Tests for the proxy routes: validation, relay, cache headers, failure mapping."""
import sys
import os
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
import pytest

from main import ResponseCache


# (local route, upstream path, s-maxage)
ROUTES = [
    ("/api/fpl/bootstrap-static", "/bootstrap-static/", 900),
    ("/api/fpl/fixtures", "/fixtures/", 1800),
    ("/api/fpl/event-status", "/event-status/", 300),
    ("/api/fpl/live/7", "/event/7/live/", 120),
    ("/api/fpl/dream-team/7", "/dream-team/7/", 1800),
    ("/api/fpl/league/314", "/leagues-classic/314/standings/?page_standings=1", 600),
    ("/api/fpl/manager/42", "/entry/42/", 300),
    ("/api/fpl/manager/42/history", "/entry/42/history/", 600),
    ("/api/fpl/manager/42/transfers", "/entry/42/transfers/", 300),
    ("/api/fpl/manager/42/picks/7", "/entry/42/event/7/picks/", 300),
    ("/api/fpl/player/308", "/element-summary/308/", 600),
]


# =============================================================================
# Validation
# =============================================================================

class TestValidation:
    @pytest.mark.parametrize("route,message", [
        ("/api/fpl/live/0", "Valid gameweek (1-38) is required"),
        ("/api/fpl/live/39", "Valid gameweek (1-38) is required"),
        ("/api/fpl/live/-1", "Valid gameweek (1-38) is required"),
        ("/api/fpl/live/abc", "Valid gameweek (1-38) is required"),
        ("/api/fpl/dream-team/0", "Valid gameweek (1-38) is required"),
        ("/api/fpl/manager/abc", "Valid manager ID is required"),
        ("/api/fpl/manager/0", "Valid manager ID is required"),
        ("/api/fpl/manager/-5/history", "Valid manager ID is required"),
        ("/api/fpl/manager/1.5/transfers", "Valid manager ID is required"),
        ("/api/fpl/manager/abc/picks/0", "Valid manager ID is required"),
        ("/api/fpl/manager/42/picks/40", "Valid gameweek (1-38) is required"),
        ("/api/fpl/player/x", "Valid player ID is required"),
        ("/api/fpl/league/abc", "Valid league ID is required"),
        ("/api/fpl/league/314?page=0", "Valid page number is required"),
        ("/api/fpl/league/314?page=two", "Valid page number is required"),
        ("/api/fpl/manager/" + "9" * 5000, "Valid manager ID is required"),
        ("/api/fpl/player/" + "1" * 19, "Valid player ID is required"),
    ])
    def test_bad_parameter_is_400_without_upstream_call(self, client, upstream, route, message):
        response = client.get(route)
        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert upstream.requests == []

    def test_live_gameweek_zero_scenario(self, client, upstream):
        response = client.get("/api/fpl/live/0")
        assert response.status_code == 400
        assert response.json() == {"error": "Valid gameweek (1-38) is required"}
        assert upstream.requests == []

    def test_gameweek_bounds_are_inclusive(self, client, upstream):
        upstream.add("/event/1/live/", {"elements": []})
        upstream.add("/event/38/live/", {"elements": []})
        assert client.get("/api/fpl/live/1").status_code == 200
        assert client.get("/api/fpl/live/38").status_code == 200


# =============================================================================
# Relay & cache directive
# =============================================================================

class TestRelay:
    @pytest.mark.parametrize("route,upstream_path,max_age", ROUTES)
    def test_body_relayed_verbatim_with_cache_header(self, client, upstream, route, upstream_path, max_age):
        raw = b'{"a" :  1,\n "nested": {"b": [1, 2.50, "\\u00e9"]}}'
        upstream.add(upstream_path, content=raw)

        response = client.get(route)

        assert response.status_code == 200
        assert response.content == raw
        assert response.headers["cache-control"] == (
            f"public, s-maxage={max_age}, stale-while-revalidate={max_age * 2}"
        )
        assert upstream.paths == [upstream_path]

    def test_upstream_request_has_json_content_type_and_no_auth(self, client, upstream):
        upstream.add("/fixtures/", [])
        client.get("/api/fpl/fixtures")
        sent = upstream.requests[0]
        assert sent.method == "GET"
        assert sent.headers["content-type"] == "application/json"
        assert "authorization" not in sent.headers
        assert sent.content == b""

    def test_league_page_is_forwarded(self, client, upstream):
        upstream.add("/leagues-classic/314/standings/?page_standings=3", {"standings": {}})
        response = client.get("/api/fpl/league/314?page=3")
        assert response.status_code == 200
        assert upstream.paths == ["/leagues-classic/314/standings/?page_standings=3"]

    def test_leading_zeros_normalised(self, client, upstream):
        upstream.add("/entry/42/", {"id": 42})
        assert client.get("/api/fpl/manager/0042").status_code == 200
        assert upstream.paths == ["/entry/42/"]


# =============================================================================
# Failure mapping
# =============================================================================

class TestFailureMapping:
    def test_unknown_manager_scenario(self, client, upstream):
        upstream.add("/entry/999999999/", {"detail": "Not found."}, status=404)
        response = client.get("/api/fpl/manager/999999999")
        assert response.status_code == 404
        assert response.json() == {"error": "Manager not found"}

    @pytest.mark.parametrize("route,upstream_path,message", [
        ("/api/fpl/league/314", "/leagues-classic/314/standings/?page_standings=1", "League not found"),
        ("/api/fpl/manager/42/history", "/entry/42/history/", "Manager history not found"),
        ("/api/fpl/manager/42/transfers", "/entry/42/transfers/", "Manager transfers not found"),
        ("/api/fpl/manager/42/picks/7", "/entry/42/event/7/picks/", "Manager picks not found for this gameweek"),
        ("/api/fpl/player/308", "/element-summary/308/", "Player not found"),
        ("/api/fpl/live/7", "/event/7/live/", "Live data not found for this gameweek"),
        ("/api/fpl/dream-team/7", "/dream-team/7/", "Dream team not found for this gameweek"),
    ])
    def test_upstream_404_maps_to_resource_message(self, client, upstream, route, upstream_path, message):
        upstream.add(upstream_path, status=404)
        response = client.get(route)
        assert response.status_code == 404
        assert response.json() == {"error": message}

    @pytest.mark.parametrize("route,upstream_path,message", [
        ("/api/fpl/bootstrap-static", "/bootstrap-static/", "Bootstrap data not found"),
        ("/api/fpl/fixtures", "/fixtures/", "Fixtures not found"),
        ("/api/fpl/event-status", "/event-status/", "Event status not found"),
    ])
    def test_404_on_parameterless_resource(self, client, upstream, route, upstream_path, message):
        upstream.add(upstream_path, status=404)
        response = client.get(route)
        assert response.status_code == 404
        assert response.json() == {"error": message}

    @pytest.mark.parametrize("status", [400, 403, 429, 500, 502, 503])
    def test_other_statuses_map_to_generic_500(self, client, upstream, status):
        upstream.add("/entry/42/transfers/", status=status)
        response = client.get("/api/fpl/manager/42/transfers")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch manager 42 transfers"}
        # no retries by default
        assert len(upstream.requests) == 1

    @pytest.mark.parametrize("exc_type", [httpx.ConnectError, httpx.ReadTimeout])
    def test_transport_failure_maps_to_500(self, client, upstream, exc_type):
        upstream.raise_on("/entry/42/event/7/picks/", exc_type)
        response = client.get("/api/fpl/manager/42/picks/7")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch manager 42 picks for GW7"}

    def test_non_json_body_maps_to_500(self, client, upstream):
        upstream.add("/event/7/live/", content=b"<html>maintenance</html>")
        response = client.get("/api/fpl/live/7")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch live data for GW7"}

    def test_failures_are_not_cached(self, client, upstream):
        upstream.add("/fixtures/", status=503)
        upstream.add("/fixtures/", [{"id": 1}])
        assert client.get("/api/fpl/fixtures").status_code == 500
        assert client.get("/api/fpl/fixtures").status_code == 200
        assert len(upstream.requests) == 2


# =============================================================================
# Response cache
# =============================================================================

class TestResponseCaching:
    def test_repeat_within_window_served_from_cache(self, client, upstream):
        upstream.add("/bootstrap-static/", {"events": [], "teams": [], "elements": []})
        first = client.get("/api/fpl/bootstrap-static")
        second = client.get("/api/fpl/bootstrap-static")
        assert first.content == second.content
        assert second.headers["cache-control"] == "public, s-maxage=900, stale-while-revalidate=1800"
        assert len(upstream.requests) == 1

    def test_refetch_after_window(self, make_client, upstream, fake_clock):
        clock = fake_clock
        client = make_client(response_cache=ResponseCache(clock=clock))
        upstream.add("/event/3/live/", {"elements": [{"id": 1}]})

        client.get("/api/fpl/live/3")
        clock.advance(119)
        client.get("/api/fpl/live/3")
        assert len(upstream.requests) == 1

        clock.advance(1)
        client.get("/api/fpl/live/3")
        assert len(upstream.requests) == 2

    def test_distinct_parameters_cached_separately(self, client, upstream):
        upstream.add("/entry/1/", {"id": 1})
        upstream.add("/entry/2/", {"id": 2})
        assert client.get("/api/fpl/manager/1").json() == {"id": 1}
        assert client.get("/api/fpl/manager/2").json() == {"id": 2}
        assert client.get("/api/fpl/manager/1").json() == {"id": 1}
        assert upstream.paths == ["/entry/1/", "/entry/2/"]

    def test_cache_disabled_always_goes_upstream(self, make_client, upstream):
        client = make_client(cache_enabled=False)
        upstream.add("/fixtures/", [])
        client.get("/api/fpl/fixtures")
        client.get("/api/fpl/fixtures")
        assert len(upstream.requests) == 2


# =============================================================================
# Optional behaviour: retry and shape validation
# =============================================================================

class TestRetryAndValidation:
    @patch("fpl_gateway.services._retry_delay", return_value=0.0)
    def test_bounded_retry_recovers_from_transient_error(self, mock_delay, make_client, upstream):
        client = make_client(upstream_retries=2)
        upstream.add("/event-status/", status=503)
        upstream.add("/event-status/", {"status": []})
        response = client.get("/api/fpl/event-status")
        assert response.status_code == 200
        assert len(upstream.requests) == 2

    @patch("fpl_gateway.services._retry_delay", return_value=0.0)
    def test_retry_gives_up_after_limit(self, mock_delay, make_client, upstream):
        client = make_client(upstream_retries=2)
        upstream.add("/event-status/", status=503)
        response = client.get("/api/fpl/event-status")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch event status"}
        assert len(upstream.requests) == 3

    @patch("fpl_gateway.services._retry_delay", return_value=0.0)
    def test_404_is_never_retried(self, mock_delay, make_client, upstream):
        client = make_client(upstream_retries=2)
        upstream.add("/entry/5/", status=404)
        assert client.get("/api/fpl/manager/5").status_code == 404
        assert len(upstream.requests) == 1

    def test_negative_retry_setting_means_single_attempt(self, make_client, upstream):
        client = make_client(upstream_retries=-1)
        upstream.add("/event-status/", {"status": []})
        response = client.get("/api/fpl/event-status")
        assert response.status_code == 200
        assert len(upstream.requests) == 1

    def test_unexpected_shape_is_distinct_error(self, make_client, upstream):
        client = make_client(validate_upstream=True)
        upstream.add("/bootstrap-static/", {"maintenance": True})
        response = client.get("/api/fpl/bootstrap-static")
        assert response.status_code == 502
        assert response.json() == {"error": "Unexpected response shape for bootstrap data"}

    def test_valid_shape_still_relayed_verbatim(self, make_client, upstream):
        client = make_client(validate_upstream=True)
        raw = b'{"id": 42, "name": "Team",  "extra": null}'
        upstream.add("/entry/42/", content=raw)
        response = client.get("/api/fpl/manager/42")
        assert response.status_code == 200
        assert response.content == raw

    def test_list_resource_shape(self, make_client, upstream):
        client = make_client(validate_upstream=True)
        upstream.add("/entry/42/transfers/", {"not": "a list"})
        assert client.get("/api/fpl/manager/42/transfers").status_code == 502


class TestHealth:
    def test_health_reports_cache(self, client, upstream):
        upstream.add("/fixtures/", [])
        client.get("/api/fpl/fixtures")
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["cache_entries"] == 1
        assert body["upstream_retries"] == 0

    def test_error_envelope_documented_on_routes(self, client):
        schema = client.get("/openapi.json").json()
        assert "ErrorEnvelope" in schema["components"]["schemas"]
        responses = schema["paths"]["/api/fpl/manager/{manager_id}"]["get"]["responses"]
        assert set(responses) >= {"200", "400", "404", "500"}
