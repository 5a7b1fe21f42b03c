import httpx

from src.adapters.google_oauth import GoogleTokenInfoVerifier

CLIENT_ID = "client-123.apps.googleusercontent.com"


def verifier_for(handler, client_id=CLIENT_ID) -> GoogleTokenInfoVerifier:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleTokenInfoVerifier(client_id, http_client=http)


def claims(**overrides):
    base = {
        "aud": CLIENT_ID,
        "iss": "https://accounts.google.com",
        "sub": "10987654321",
        "email": "Jane@Example.com",
        "email_verified": "true",
        "name": "Jane Doe",
        "picture": "https://lh3.googleusercontent.com/a/jane",
    }
    return {**base, **overrides}


def test_valid_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["id_token"] = request.url.params.get("id_token")
        return httpx.Response(200, json=claims())

    identity = verifier_for(handler).verify("tok")

    assert seen["id_token"] == "tok"
    assert identity is not None
    assert identity.google_id == "10987654321"
    assert identity.email == "Jane@Example.com"
    assert identity.name == "Jane Doe"
    assert identity.email_verified is True


def test_wrong_audience():
    identity = verifier_for(lambda r: httpx.Response(200, json=claims(aud="other"))).verify("t")
    assert identity is None


def test_wrong_issuer():
    identity = verifier_for(
        lambda r: httpx.Response(200, json=claims(iss="https://evil.example"))
    ).verify("t")
    assert identity is None


def test_rejected_by_google():
    identity = verifier_for(
        lambda r: httpx.Response(400, json={"error": "invalid_token"})
    ).verify("t")
    assert identity is None


def test_network_error():
    def handler(request):
        raise httpx.ConnectTimeout("timeout", request=request)

    assert verifier_for(handler).verify("t") is None


def test_no_client_configured():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=claims())

    assert verifier_for(handler, client_id="").verify("t") is None
    assert calls == []
