from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest

from listmonk_ops import (
    AuthenticationError,
    ConfigurationError,
    ListmonkClient,
    ListmonkError,
    MissingOperationError,
    NotFoundError,
    ServerError,
    UnsupportedOperationError,
    create_listmonk_client,
    is_error_result,
)
from listmonk_ops.sdk import OPERATIONS


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def test_client_exposes_every_namespace(make_client) -> None:
    client = make_client()

    for namespace in (
        "list",
        "subscriber",
        "campaign",
        "template",
        "media",
        "imports",
        "bounce",
        "transactional",
        "settings",
        "dashboard",
        "system",
    ):
        assert getattr(client, namespace) is not None


def test_missing_token_fails_before_any_request(handler) -> None:
    with pytest.raises(ConfigurationError, match="auth.token is required"):
        create_listmonk_client(
            {"base_url": "http://listmonk.test/api"},
            transport=httpx.MockTransport(handler),
        )

    assert handler.requests == []


def test_token_from_environment_is_used(monkeypatch: pytest.MonkeyPatch, handler) -> None:
    monkeypatch.setenv("LISTMONK_API_TOKEN", "env-token")
    monkeypatch.setenv("LISTMONK_API_URL", "http://listmonk.test/api")

    client = create_listmonk_client(transport=httpx.MockTransport(handler))

    assert client.config is not None
    assert client.config.auth.token == "env-token"


def test_incomplete_table_fails_at_assembly(handler) -> None:
    table = {name: fn for name, fn in OPERATIONS.items() if name != "get_template_by_id"}

    with pytest.raises(MissingOperationError, match="get_template_by_id method not found"):
        create_listmonk_client(
            {"base_url": "http://listmonk.test/api", "auth": {"token": "secret"}},
            transport=httpx.MockTransport(handler),
            table=table,
        )

    assert handler.requests == []


def test_operation_table_names_match_functions() -> None:
    for name, function in OPERATIONS.items():
        assert function.__name__ == name


# ---------------------------------------------------------------------------
# Resource operations over HTTP
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_request_shape_and_flattening(make_client, handler) -> None:
    handler.route(
        "GET",
        "/lists",
        httpx.Response(200, json={"data": {"results": [{"id": 1}], "total": 1, "page": 1, "per_page": 20}}),
    )
    async with make_client() as client:
        result = await client.list.list(query={"page": 1, "per_page": 20, "query": ""})

    request = handler.last
    assert request.method == "GET"
    assert request.url.path == "/api/lists"
    assert parse_qs(request.url.query.decode()) == {"page": ["1"], "per_page": ["20"]}
    assert request.headers["Authorization"] == "token api-admin:secret"
    assert result["data"] == {"results": [{"id": 1}], "total": 1, "page": 1, "per_page": 20}
    assert isinstance(result["response"], httpx.Response)


@pytest.mark.asyncio
async def test_create_sends_json_body(make_client, handler) -> None:
    handler.route("POST", "/lists", httpx.Response(200, json={"data": {"id": 5, "name": "News"}}))
    async with make_client() as client:
        result = await client.list.create(body={"name": "News", "type": "public"})

    assert handler.last.headers["Content-Type"] == "application/json"
    assert handler.last_json() == {"name": "News", "type": "public"}
    assert result["data"] == {"id": 5, "name": "News"}


@pytest.mark.asyncio
async def test_path_parameters_are_substituted(make_client, handler) -> None:
    async with make_client() as client:
        await client.list.update(path={"list_id": 12}, body={"name": "Renamed"})
        await client.subscriber.delete(path={"id": 7})

    assert [(r.method, r.url.path) for r in handler.requests] == [
        ("PUT", "/api/lists/12"),
        ("DELETE", "/api/subscribers/7"),
    ]


@pytest.mark.asyncio
async def test_missing_path_parameter_raises(make_client) -> None:
    async with make_client() as client:
        with pytest.raises(ListmonkError, match="Missing path parameter 'list_id'"):
            await client.list.get_by_id()


@pytest.mark.asyncio
async def test_get_by_id_not_found_is_returned_as_data(make_client, handler) -> None:
    handler.route("GET", "/campaigns/99", httpx.Response(404, json={"message": "Campaign not found"}))
    async with make_client() as client:
        result = await client.campaign.get_by_id(path={"id": 99})

    assert is_error_result(result)
    assert result["error"] == {"message": "Campaign not found"}
    assert result["response"].status_code == 404


@pytest.mark.asyncio
async def test_get_by_id_unauthorized_raises(make_client, handler) -> None:
    handler.route("GET", "/campaigns/1", httpx.Response(401, json={"message": "invalid token"}))
    async with make_client() as client:
        with pytest.raises(AuthenticationError, match="invalid token"):
            await client.campaign.get_by_id(path={"id": 1})


@pytest.mark.asyncio
async def test_delete_not_found_raises(make_client, handler) -> None:
    handler.route("DELETE", "/templates/3", httpx.Response(404, json={"message": "Template not found"}))
    async with make_client() as client:
        with pytest.raises(NotFoundError) as exc_info:
            await client.template.delete(path={"id": 3})

    assert exc_info.value.response_data == {"message": "Template not found"}


@pytest.mark.asyncio
async def test_server_error_without_json_body(make_client, handler) -> None:
    handler.route("GET", "/subscribers", httpx.Response(502, text=""))
    async with make_client() as client:
        with pytest.raises(ServerError) as exc_info:
            await client.subscriber.list()

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "HTTP 502: Bad Gateway"
    assert exc_info.value.response_data is None


@pytest.mark.asyncio
async def test_text_error_body_is_attached_unchanged(make_client, handler) -> None:
    handler.route("GET", "/subscribers", httpx.Response(503, text="<html>down</html>"))
    async with make_client() as client:
        with pytest.raises(ServerError) as exc_info:
            await client.subscriber.list()

    assert exc_info.value.message == "HTTP 503: Service Unavailable"
    assert exc_info.value.response_data == "<html>down</html>"


@pytest.mark.asyncio
async def test_get_by_id_keeps_text_error_body(make_client, handler) -> None:
    handler.route("GET", "/templates/4", httpx.Response(404, text="no such template"))
    async with make_client() as client:
        result = await client.template.get_by_id(path={"id": 4})

    assert is_error_result(result)
    assert result["error"] == "no such template"


@pytest.mark.asyncio
async def test_network_failure_is_wrapped(make_client, handler) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    handler.route("GET", "/health", refuse)
    async with make_client() as client:
        with pytest.raises(ListmonkError) as exc_info:
            await client.health_check()

    assert isinstance(exc_info.value.original_error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_custom_headers_reach_the_wire(make_client, handler) -> None:
    async with make_client(headers={"X-Request-Source": "tests"}) as client:
        await client.system.health()

    assert handler.last.headers["X-Request-Source"] == "tests"


# ---------------------------------------------------------------------------
# Hand-mapped namespaces
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_subscriber_list_management(make_client, handler) -> None:
    async with make_client() as client:
        await client.subscriber.add_to_lists([1, "2"], [3], status="confirmed")
        add_body = handler.last_json()
        await client.subscriber.unsubscribe_from_lists([1], [3, 4])
        unsubscribe_body = handler.last_json()

    assert handler.last.method == "PUT"
    assert handler.last.url.path == "/api/subscribers/lists"
    assert add_body == {"ids": [1, 2], "action": "add", "target_list_ids": [3], "status": "confirmed"}
    assert unsubscribe_body == {"ids": [1], "action": "unsubscribe", "target_list_ids": [3, 4]}


@pytest.mark.asyncio
async def test_subscriber_query_operations(make_client, handler) -> None:
    async with make_client() as client:
        await client.subscriber.remove_from_lists_by_query(
            "subscribers.email LIKE '%@example.com'", [9], source_list_ids=[1]
        )
        manage = handler.last
        await client.subscriber.blocklist_by_query("subscribers.status = 'enabled'")
        blocklist = handler.last

    assert (manage.method, manage.url.path) == ("PUT", "/api/subscribers/query/lists")
    assert json.loads(manage.content) == {
        "query": "subscribers.email LIKE '%@example.com'",
        "list_ids": [1],
        "action": "remove",
        "target_list_ids": [9],
    }
    assert (blocklist.method, blocklist.url.path) == ("PUT", "/api/subscribers/query/blocklist")
    assert json.loads(blocklist.content) == {"query": "subscribers.status = 'enabled'"}


@pytest.mark.asyncio
async def test_subscriber_single_endpoints(make_client, handler) -> None:
    async with make_client() as client:
        await client.subscriber.blocklist_by_id(4)
        await client.subscriber.export_data(4)
        await client.subscriber.send_optin(4)
        await client.subscriber.get_bounces(4)
        await client.subscriber.delete_bounces(4)

    assert [(r.method, r.url.path) for r in handler.requests] == [
        ("PUT", "/api/subscribers/4/blocklist"),
        ("GET", "/api/subscribers/4/export"),
        ("POST", "/api/subscribers/4/optin"),
        ("GET", "/api/subscribers/4/bounces"),
        ("DELETE", "/api/subscribers/4/bounces"),
    ]


@pytest.mark.asyncio
async def test_campaign_status_and_test_send(make_client, handler) -> None:
    async with make_client() as client:
        await client.campaign.update_status(8, "running")
        status_request = handler.last
        await client.campaign.send_test(8, ["a@example.com"], subject="Preview")
        test_request = handler.last

    assert (status_request.method, status_request.url.path) == ("PUT", "/api/campaigns/8/status")
    assert json.loads(status_request.content) == {"status": "running"}
    assert (test_request.method, test_request.url.path) == ("POST", "/api/campaigns/8/test")
    assert json.loads(test_request.content) == {"subject": "Preview", "subscribers": ["a@example.com"]}


@pytest.mark.asyncio
async def test_campaign_preview_returns_html(make_client, handler) -> None:
    handler.route(
        "GET",
        "/campaigns/8/preview",
        httpx.Response(200, text="<h1>Hi</h1>", headers={"Content-Type": "text/html"}),
    )
    async with make_client() as client:
        result = await client.campaign.preview(8)

    assert result["data"] == "<h1>Hi</h1>"


@pytest.mark.asyncio
async def test_campaign_render_preview_is_form_encoded(make_client, handler) -> None:
    async with make_client() as client:
        await client.campaign.render_preview(8, body="<p>draft</p>", content_type="html")

    request = handler.last
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(request.content.decode()) == {"body": ["<p>draft</p>"], "content_type": ["html"]}


@pytest.mark.asyncio
async def test_campaign_analytics_query(make_client, handler) -> None:
    async with make_client() as client:
        await client.campaign.analytics("views", [1, 2], from_date="2024-01-01", to_date="2024-01-31")
        analytics = handler.last
        await client.campaign.running_stats([3])
        stats = handler.last

    assert analytics.url.path == "/api/campaigns/analytics/views"
    assert parse_qs(analytics.url.query.decode()) == {
        "id": ["1", "2"],
        "from": ["2024-01-01"],
        "to": ["2024-01-31"],
    }
    assert stats.url.path == "/api/campaigns/running/stats"
    assert parse_qs(stats.url.query.decode()) == {"campaign_id": ["3"]}


@pytest.mark.asyncio
async def test_template_default_and_preview(make_client, handler) -> None:
    async with make_client() as client:
        await client.template.set_as_default(2)
        await client.template.preview(2)

    assert [(r.method, r.url.path) for r in handler.requests] == [
        ("PUT", "/api/templates/2/default"),
        ("GET", "/api/templates/2/preview"),
    ]


@pytest.mark.asyncio
async def test_media_upload_is_multipart(make_client, handler) -> None:
    async with make_client() as client:
        await client.media.upload(b"\x89PNG", filename="logo.png", content_type="image/png")

    request = handler.last
    assert (request.method, request.url.path) == ("POST", "/api/media")
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'filename="logo.png"' in request.content


@pytest.mark.asyncio
async def test_media_has_no_create_or_update(make_client) -> None:
    async with make_client() as client:
        with pytest.raises(UnsupportedOperationError):
            await client.media.create(body={})
        with pytest.raises(UnsupportedOperationError):
            await client.media.update(path={"id": 1}, body={})


@pytest.mark.asyncio
async def test_import_start_sends_params_and_file(make_client, handler) -> None:
    async with make_client() as client:
        await client.imports.start(b"email,name\na@example.com,A\n", lists=[1, 2], overwrite=True)

    request = handler.last
    assert (request.method, request.url.path) == ("POST", "/api/import/subscribers")
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="params"' in request.content
    assert b'"lists": [1, 2]' in request.content
    assert b'"overwrite": true' in request.content


@pytest.mark.asyncio
async def test_import_status_stop_and_logs(make_client, handler) -> None:
    async with make_client() as client:
        await client.imports.status()
        await client.imports.stop()
        await client.imports.logs()

    assert [(r.method, r.url.path) for r in handler.requests] == [
        ("GET", "/api/import/subscribers"),
        ("DELETE", "/api/import/subscribers"),
        ("GET", "/api/import/subscribers/logs"),
    ]


@pytest.mark.asyncio
async def test_bounce_operations(make_client, handler) -> None:
    handler.route("GET", "/bounces/5", httpx.Response(404, json={"message": "Bounce not found"}))
    async with make_client() as client:
        await client.bounce.list(campaign_id=3, per_page="all")
        listing = handler.last
        missing = await client.bounce.get_by_id(5)
        await client.bounce.delete(all_bounces=True)
        delete_all = handler.last
        await client.bounce.delete(ids=[1, 2])
        delete_some = handler.last

    assert parse_qs(listing.url.query.decode()) == {"campaign_id": ["3"], "per_page": ["all"]}
    assert is_error_result(missing)
    assert parse_qs(delete_all.url.query.decode()) == {"all": ["true"]}
    assert parse_qs(delete_some.url.query.decode()) == {"id": ["1", "2"]}


@pytest.mark.asyncio
async def test_bounce_delete_needs_a_target(make_client, handler) -> None:
    async with make_client() as client:
        with pytest.raises(ValueError):
            await client.bounce.delete()

    assert handler.requests == []


@pytest.mark.asyncio
async def test_transactional_send(make_client, handler) -> None:
    async with make_client() as client:
        await client.transactional.send(
            4, subscriber_email="a@example.com", data={"order": 42}, content_type="html"
        )

    assert (handler.last.method, handler.last.url.path) == ("POST", "/api/tx")
    assert handler.last_json() == {
        "template_id": 4,
        "subscriber_email": "a@example.com",
        "data": {"order": 42},
        "content_type": "html",
    }


@pytest.mark.asyncio
async def test_settings_dashboard_and_system(make_client, handler) -> None:
    async with make_client() as client:
        await client.settings.get()
        await client.settings.update({"app.site_name": "News"})
        await client.settings.test_smtp({"host": "smtp.example.com"})
        await client.dashboard.charts()
        await client.dashboard.counts()
        await client.system.config()
        await client.system.logs()
        await client.system.reload()

    assert [(r.method, r.url.path) for r in handler.requests] == [
        ("GET", "/api/settings"),
        ("PUT", "/api/settings"),
        ("POST", "/api/settings/smtp/test"),
        ("GET", "/api/dashboard/charts"),
        ("GET", "/api/dashboard/counts"),
        ("GET", "/api/config"),
        ("GET", "/api/logs"),
        ("POST", "/api/admin/reload"),
    ]


@pytest.mark.asyncio
async def test_client_can_be_built_from_parts(handler) -> None:
    from listmonk_ops.client import ListmonkHTTPClient

    http_client = ListmonkHTTPClient(
        "http://listmonk.test/api/",
        headers={"Authorization": "token u:t"},
        transport=httpx.MockTransport(handler),
    )
    client = ListmonkClient(http_client)

    await client.health_check()
    await client.aclose()

    assert handler.last.url.path == "/api/health"
    assert handler.last.headers["Authorization"] == "token u:t"


@pytest.mark.asyncio
async def test_zero_timeout_disables_the_limit(make_client) -> None:
    async with make_client(timeout=0) as client:
        assert client._http_client._client.timeout == httpx.Timeout(None)


@pytest.mark.asyncio
async def test_timeout_is_converted_to_seconds(make_client) -> None:
    async with make_client(timeout=2500) as client:
        assert client._http_client._client.timeout == httpx.Timeout(2.5)
