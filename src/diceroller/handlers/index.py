"""
Landing page: an HTML tester for the four API endpoints.

Each button fetches one endpoint from the page's own origin and prints the
JSON (or the error) under it. The CORS button is expected to fail only when
the page is served from a different origin than the API.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, HTTPStatus


INDEX_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Dice Roller API</title>
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
               max-width: 720px; margin: 40px auto; padding: 0 20px; color: #333; }
        code { background: #f1f1f1; padding: 2px 6px; border-radius: 4px; }
        .test { margin: 16px 0; }
        .result { font-family: monospace; min-height: 1.2em; }
    </style>
</head>
<body>
    <h1>Dice Roller API</h1>

    <h2>Available Endpoints:</h2>
    <ul>
        <li><code>GET /api/wake</code> - Wake up server</li>
        <li><code>GET /api/random</code> - Get random number (0-1)</li>
        <li><code>GET /api/roll/:sides</code> - Roll a die</li>
        <li><code>GET /api/no-cors</code> - Test CORS failure</li>
    </ul>

    <h2>Test the API:</h2>
    <div class="test">
        <button onclick="testWake()">Test /api/wake</button>
        <p id="wake-result" class="result"></p>
    </div>
    <div class="test">
        <button onclick="testRandom()">Test /api/random</button>
        <p id="random-result" class="result"></p>
    </div>
    <div class="test">
        <input type="number" id="sides" value="6" min="1">
        <button onclick="testRoll()">Test /api/roll</button>
        <p id="roll-result" class="result"></p>
    </div>
    <div class="test">
        <button onclick="testCORS()">Test CORS Failure</button>
        <p id="cors-result" class="result"></p>
    </div>

    <script>
        async function show(url, resultId, errorPrefix) {
            const target = document.getElementById(resultId);
            try {
                const res = await fetch(url);
                const data = await res.json();
                target.textContent = JSON.stringify(data);
            } catch (e) {
                target.textContent = errorPrefix + e.message;
            }
        }

        function testWake() {
            show('/api/wake', 'wake-result', 'Error: ');
        }

        function testRandom() {
            show('/api/random', 'random-result', 'Error: ');
        }

        function testRoll() {
            const sides = document.getElementById('sides').value;
            show('/api/roll/' + encodeURIComponent(sides), 'roll-result', 'Error: ');
        }

        function testCORS() {
            show('/api/no-cors', 'cors-result', 'CORS Error (expected): ');
        }
    </script>
</body>
</html>
"""


def index(request: HTTPRequest) -> HTTPResponse:
    """Serve the tester page."""
    return ResponseBuilder().status(HTTPStatus.OK).html(INDEX_PAGE).build()
