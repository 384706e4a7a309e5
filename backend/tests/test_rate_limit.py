from starlette.requests import Request

from clubrank.rate_limit import client_ip


def _request(headers=None, client=("10.0.0.1", 1234)):
    scope = {
        "type": "http",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


def test_client_ip_prefers_last_forwarded_hop():
    req = _request({"X-Forwarded-For": "1.1.1.1, 2.2.2.2"})
    assert client_ip(req) == "2.2.2.2"


def test_client_ip_falls_back_to_real_ip_then_peer():
    assert client_ip(_request({"X-Real-IP": "3.3.3.3"})) == "3.3.3.3"
    assert client_ip(_request()) == "10.0.0.1"
    assert client_ip(_request(client=None)) == "anonymous"
