import json

import httpx
import pytest

from src.adapters.profile_client import HttpCollectionGateway, HttpProfileClient
from src.components.editor import PERSIST_FAILED, EditingSession, OrderedCollectionEditor
from src.domain.entities import LinkItem


def make_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")


@pytest.fixture
def links():
    return [
        LinkItem(id="custom-1", title="Blog", url="https://blog.example"),
        LinkItem(id="custom-2", title="Shop", url="https://shop.example"),
    ]


def test_replace_all_sends_full_array(links):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        echoed = [{**item, "id": f"srv-{i}"} for i, item in enumerate(seen["body"]["links"])]
        return httpx.Response(
            200, json={"success": True, "message": "ok", "data": {"links": echoed}}
        )

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert seen["method"] == "PUT"
    assert seen["path"] == "/api/profile/links"
    assert [i["title"] for i in seen["body"]["links"]] == ["Blog", "Shop"]
    assert result.success is True
    assert [i.id for i in result.items] == ["srv-0", "srv-1"]


def test_success_without_echo(links):
    def handler(request):
        return httpx.Response(200, json={"success": True})

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert result.success is True
    assert result.items is None


@pytest.mark.parametrize("status", [400, 409, 422])
def test_rejection_statuses(links, status):
    def handler(request):
        return httpx.Response(status, json={"success": False, "message": "Title is required"})

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert result.success is False
    assert result.rejected is True
    assert result.message == "Title is required"


def test_server_error_is_not_a_rejection(links):
    def handler(request):
        return httpx.Response(503, text="unavailable")

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert result.success is False
    assert result.rejected is False
    assert result.message == "Server returned 503"


def test_transport_error(links):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert result.success is False
    assert result.rejected is False
    assert result.message.startswith("Network error")


def test_success_false_body_is_rejection(links):
    def handler(request):
        return httpx.Response(200, json={"success": False, "message": "Nope"})

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert result.rejected is True
    assert result.message == "Nope"


@pytest.mark.parametrize(
    "body",
    [[1], "saved", {"success": True, "data": [1]}, {"success": True, "data": {"links": "x"}}],
)
def test_malformed_success_body_is_a_failure(links, body):
    def handler(request):
        return httpx.Response(200, json=body)

    result = HttpCollectionGateway(make_client(handler), "links").replace_all(links)

    assert result.success is False
    assert result.rejected is False
    assert result.message == "Server returned an invalid response"


def test_malformed_body_keeps_editor_draft(links):
    def handler(request):
        return httpx.Response(200, json=[1])

    editor = OrderedCollectionEditor(
        "links", HttpCollectionGateway(make_client(handler), "links"), items=links
    )
    editor.start_edit()
    editor.reorder(1, 0)

    result = editor.save()

    assert result.success is False
    assert result.error.code == PERSIST_FAILED
    assert editor.is_editing is True
    assert [i.id for i in editor.working] == ["custom-2", "custom-1"]
    assert [i.id for i in editor.committed] == ["custom-1", "custom-2"]


def test_profile_client_feeds_editing_session():
    puts = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": {
                        "links": [
                            {"id": "a", "title": "A", "url": "https://a.example"},
                            {"id": "b", "title": "B", "url": "https://b.example"},
                        ],
                        "experiences": [],
                    },
                },
            )
        puts.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "data": puts[-1]})

    with EditingSession(HttpProfileClient(make_client(handler))) as session:
        editor = session.editor("links")
        editor.start_edit()
        session.step_controls("links").move_up(1)
        result = editor.save()

    assert result.success is True
    assert [i["id"] for i in puts[0]["links"]] == ["b", "a"]
