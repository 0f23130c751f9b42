"""Tests for rovermock.routing.router: compiled route table."""

import pytest

from rovermock.errors import DuplicateRouteError, MethodNotAllowed, NotFound
from rovermock.routing.latency import LatencyPolicy
from rovermock.routing.route import Route
from rovermock.routing.router import Router, join_path, normalize_path


def _handler() -> str:
    return "ok"


def _route(path: str, methods: frozenset[str] | None = None, **kwargs) -> Route:
    return Route(path=path, handler=_handler, methods=methods or frozenset({"GET"}), **kwargs)


class TestPaths:
    def test_normalize_adds_leading_slash(self) -> None:
        assert normalize_path("sense/distance") == "/sense/distance"

    def test_normalize_collapses_slashes(self) -> None:
        assert normalize_path("/api//move/") == "/api/move"

    def test_normalize_root(self) -> None:
        assert normalize_path("") == "/"
        assert normalize_path("/") == "/"

    def test_join_namespace(self) -> None:
        assert join_path("api", "sense/lines") == "/api/sense/lines"
        assert join_path("", "move") == "/move"


class TestMatch:
    def test_exact_match(self) -> None:
        r = Router()
        r.add(_route("/api/move", frozenset({"POST"})))
        r.compile()

        assert r.match("POST", "/api/move").path == "/api/move"

    def test_trailing_slash_matches(self) -> None:
        r = Router()
        r.add(_route("/api/sense/lines"))
        r.compile()

        assert r.match("GET", "/api/sense/lines/").path == "/api/sense/lines"

    def test_method_is_case_insensitive(self) -> None:
        r = Router()
        r.add(_route("/api/look", frozenset({"POST"})))
        r.compile()

        assert r.match("post", "/api/look").path == "/api/look"

    def test_same_path_different_methods(self) -> None:
        r = Router()
        get_route = _route("/api/move", frozenset({"GET"}))
        post_route = _route("/api/move", frozenset({"POST"}))
        r.add(get_route)
        r.add(post_route)
        r.compile()

        assert r.match("GET", "/api/move") is get_route
        assert r.match("POST", "/api/move") is post_route

    def test_not_found(self) -> None:
        r = Router()
        r.add(_route("/api/move"))
        r.compile()

        with pytest.raises(NotFound):
            r.match("GET", "/api/fly")

    def test_prefix_is_not_a_match(self) -> None:
        r = Router()
        r.add(_route("/api/sense/distance"))
        r.compile()

        with pytest.raises(NotFound):
            r.match("GET", "/api/sense")

    def test_method_not_allowed(self) -> None:
        r = Router()
        r.add(_route("/api/move", frozenset({"POST"})))
        r.compile()

        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("DELETE", "/api/move")
        assert exc_info.value.headers == (("Allow", "POST"),)

    def test_latency_carried_on_route(self) -> None:
        policy = LatencyPolicy(max_ms=3000)
        r = Router()
        r.add(_route("/api/sense/obstacles", latency=policy))
        r.compile()

        assert r.match("GET", "/api/sense/obstacles").latency is policy


class TestRegistration:
    def test_duplicate_rejected(self) -> None:
        r = Router()
        r.add(_route("/api/move", frozenset({"POST"})))

        with pytest.raises(DuplicateRouteError):
            r.add(_route("api/move/", frozenset({"POST"})))

    def test_partial_overlap_rejected(self) -> None:
        r = Router()
        r.add(_route("/api/move", frozenset({"POST"})))

        with pytest.raises(DuplicateRouteError):
            r.add(_route("/api/move", frozenset({"GET", "POST"})))

        # Nothing from the rejected route was registered
        r.compile()
        with pytest.raises(MethodNotAllowed):
            r.match("GET", "/api/move")

    def test_add_after_compile(self) -> None:
        r = Router()
        r.compile()

        with pytest.raises(RuntimeError, match="after compilation"):
            r.add(_route("/api/move"))

    def test_routes_listed_once(self) -> None:
        r = Router()
        both = _route("/api/move", frozenset({"GET", "POST"}))
        r.add(both)
        r.add(_route("/api/look"))

        assert len(r.routes) == 2
        assert both in r.routes

    def test_has_reports_taken_keys(self) -> None:
        r = Router()
        r.add(_route("/api/move", frozenset({"POST"})))
        r.compile()

        assert r.has("post", "/api/move/")
        assert not r.has("GET", "/api/move")
        assert not r.has("POST", "/api/look")
