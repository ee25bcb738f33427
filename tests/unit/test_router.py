"""
Unit tests for URL router.
"""

from diceroller.http.router import Router
from diceroller.http.request import HTTPRequest
from diceroller.http.response import HTTPResponse, ResponseBuilder


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Echo the path and path params."""
    return ResponseBuilder().json({"path": request.path, "params": request.path_params}).build()


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        route = router.add_route("/api/wake", dummy_handler, method="get")

        assert router.routes() == [route]
        assert route.method == "GET"
        assert route.name == "dummy_handler"

    def test_match_static_path(self):
        """Test matching static paths."""
        router = Router()
        router.add_route("/api/wake", dummy_handler, method="GET")
        router.add_route("/api/random", dummy_handler, method="GET")

        assert router.match("GET", "/api/wake").route.path == "/api/wake"
        assert router.match("GET", "/api/random").route.path == "/api/random"
        assert router.match("GET", "/api/other") is None

    def test_match_root(self):
        """Test that "/" matches only the root."""
        router = Router()
        router.add_route("/", dummy_handler, method="GET")

        assert router.match("GET", "/") is not None
        assert router.match("GET", "/api") is None

    def test_match_dynamic_param(self):
        """Test :param segments."""
        router = Router()
        router.add_route("/api/roll/:sides", dummy_handler, method="GET")

        match = router.match("GET", "/api/roll/20")
        assert match is not None
        assert match.params == {"sides": "20"}

    def test_param_matches_one_segment(self):
        """Test that a parameter does not span slashes or match empty."""
        router = Router()
        router.add_route("/api/roll/:sides", dummy_handler, method="GET")

        assert router.match("GET", "/api/roll/6/extra") is None
        assert router.match("GET", "/api/roll") is None

    def test_trailing_slash_ignored(self):
        """Test trailing slash normalization."""
        router = Router()
        router.add_route("/api/wake", dummy_handler, method="GET")

        assert router.match("GET", "/api/wake/") is not None

    def test_method_mismatch(self):
        """Test that other methods do not match a GET route."""
        router = Router()
        router.add_route("/api/wake", dummy_handler, method="GET")

        assert router.match("POST", "/api/wake") is None
        assert router.match("get", "/api/wake") is not None

    def test_any_method_route(self):
        """Test that method=None matches every method."""
        router = Router()
        router.add_route("/any", dummy_handler)

        assert router.match("DELETE", "/any") is not None

    def test_first_match_wins(self):
        """Test registration order decides between overlapping routes."""
        router = Router()
        router.add_route("/api/roll/:sides", dummy_handler, method="GET", name="param")
        router.add_route("/api/roll/six", dummy_handler, method="GET", name="static")

        assert router.match("GET", "/api/roll/six").route.name == "param"


class TestRouterHandle:
    """Tests for request dispatch."""

    def test_handle_injects_params(self):
        """Test that path params reach the handler."""
        router = Router()
        router.add_route("/api/roll/:sides", dummy_handler, method="GET")

        response = router.handle(make_request("GET", "/api/roll/12"))

        assert response.status == 200
        assert response.json["params"] == {"sides": "12"}

    def test_handle_injects_route_meta(self):
        """Test that route metadata is copied onto the request."""
        router = Router()
        router.add_route("/api/no-cors", dummy_handler, method="GET", cors=False)
        request = make_request("GET", "/api/no-cors")

        router.handle(request)

        assert request.route_meta == {"cors": False}

    def test_handle_not_found(self):
        """Test the 404 body for unmatched requests."""
        router = Router()
        router.add_route("/api/wake", dummy_handler, method="GET")

        for method, path in [("GET", "/nonexistent"), ("POST", "/api/wake")]:
            response = router.handle(make_request(method, path))
            assert response.status == 404
            assert response.json == {"error": "Not found"}


class TestRouteDecorators:
    """Tests for decorator-style registration."""

    def test_get_decorator(self):
        """Test @router.get returns the handler unchanged."""
        router = Router()

        @router.get("/api/random")
        def random_number(request):
            return dummy_handler(request)

        assert callable(random_number)
        assert router.match("GET", "/api/random").route.name == "random_number"

    def test_decorator_meta(self):
        """Test keyword metadata on decorators."""
        router = Router()
        router.get("/api/no-cors", cors=False)(dummy_handler)

        assert router.routes()[0].meta == {"cors": False}

    def test_describe(self):
        """Test the route listing used for startup logging."""
        router = Router()
        router.get("/api/wake")(dummy_handler)
        router.add_route("/any", dummy_handler)

        lines = router.describe()
        assert lines[0].split() == ["GET", "/api/wake"]
        assert lines[1].split() == ["ANY", "/any"]
