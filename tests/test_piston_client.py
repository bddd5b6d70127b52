"""
Tests for the Piston HTTP client, using httpx's mock transport
"""

import json

import httpx
import pytest

from runlab.services.piston_client import PistonClient, RuntimeTimeout, RuntimeTransportError


def make_client(handler):
    return PistonClient("http://piston.test/api/v2/piston", timeout=2.0, transport=httpx.MockTransport(handler))


class TestPistonClient:
    """Test request shape and transport error mapping"""

    def test_posts_single_file_request(self):
        """Should send language, version and one file to /execute"""
        seen = {}

        def handler(request):
            seen['path'] = request.url.path
            seen['body'] = json.loads(request.content)
            return httpx.Response(200, json={"run": {"code": 0, "output": "ok"}})

        data = make_client(handler).execute("python", "3.10.0", "print('ok')")

        assert seen['path'] == "/api/v2/piston/execute"
        assert seen['body'] == {"language": "python", "version": "3.10.0", "files": [{"content": "print('ok')"}]}
        assert data["run"]["output"] == "ok"

    def test_error_status_body_is_returned(self):
        """Should hand back the message body of a 4xx answer"""
        client = make_client(lambda request: httpx.Response(400, json={"message": "runtime is unknown"}))

        assert client.execute("brainfuck", "1.0", "+") == {"message": "runtime is unknown"}

    def test_connection_error(self):
        """Should raise RuntimeTransportError when the runtime is unreachable"""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RuntimeTransportError):
            make_client(handler).execute("python", "3.10.0", "print(1)")

    def test_timeout(self):
        """Should raise RuntimeTimeout when the runtime is too slow"""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RuntimeTimeout):
            make_client(handler).execute("python", "3.10.0", "print(1)")

    def test_non_json_body(self):
        """Should raise RuntimeTransportError on an unreadable body"""
        client = make_client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

        with pytest.raises(RuntimeTransportError):
            client.execute("python", "3.10.0", "print(1)")

    def test_health_check(self):
        """Should report whether /runtimes answers"""
        assert make_client(lambda request: httpx.Response(200, json=[])).health_check() is True

        def down(request):
            raise httpx.ConnectError("down", request=request)

        assert make_client(down).health_check() is False
