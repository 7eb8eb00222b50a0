"""Model Context Protocol server exposing Listmonk tools."""

from __future__ import annotations

import json
import logging
import math
import os
import sys
from contextlib import asynccontextmanager
from typing import Any, Mapping

import anyio
from dotenv import load_dotenv
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from listmonk_ops.errors import ConfigurationError, ListmonkError, create_error_from_response
from listmonk_ops.facade import ListmonkClient, create_listmonk_client
from listmonk_ops.models import CrudResult, Page, is_error_result

logger = logging.getLogger(__name__)


def _json(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, default=str)


@asynccontextmanager
async def lifespan(app: Server):
    """Configure the Listmonk client for the server lifecycle."""
    load_dotenv()

    try:
        client = create_listmonk_client()
    except ConfigurationError as e:
        raise RuntimeError(f"Failed to initialize Listmonk client: {e}") from e

    logger.info("Listmonk MCP server connected to %s", client.config.base_url if client.config else "?")
    app.listmonk_client = client  # type: ignore[attr-defined]

    try:
        yield
    finally:
        await client.aclose()


server = Server(
    name="listmonk-ops-mcp",
    version="0.1.0",
    instructions=(
        "Tools for managing a Listmonk newsletter server: subscriber lists, subscribers, "
        "campaigns, templates, media, bounces, transactional mail and settings.\n"
        "\n"
        "Listing tools are paginated. Check the pagination summary at the end of each "
        "listing and request further pages when the user needs the complete set.\n"
        "Look up list, template and campaign IDs with the listing tools before referencing "
        "them; the API accepts numeric IDs only.\n"
        "Confirm with the user before deleting anything, changing a campaign's status, or "
        "sending test and transactional mail."
    ),
    website_url="https://listmonk.app/docs/apis/apis/",
    lifespan=lifespan,
)


def _id_input(description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {"id": {"type": "integer", "description": description}},
        "required": ["id"],
        "additionalProperties": False,
    }


_PAGINATION_PROPERTIES: dict[str, Any] = {
    "page": {
        "type": "integer",
        "minimum": 1,
        "default": 1,
        "description": "Page number to retrieve.",
    },
    "per_page": {
        "type": "integer",
        "minimum": 1,
        "default": 20,
        "description": "Number of items per page.",
    },
}

_ID_LIST = {"type": "array", "items": {"type": "integer"}}


TOOL_DEFINITIONS: list[types.Tool] = [
    types.Tool(
        name="listmonk_health_check",
        title="Health Check",
        description="Check that the Listmonk server is reachable and healthy.",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
    ),
    # Lists
    types.Tool(
        name="listmonk_get_lists",
        title="Lists. Get Lists",
        description="Retrieve a paginated set of subscriber lists with their subscriber counts.",
        inputSchema={
            "type": "object",
            "properties": {
                **_PAGINATION_PROPERTIES,
                "query": {"type": "string", "description": "Search string matched against list names."},
                "tag": {"type": "array", "items": {"type": "string"}, "description": "Only lists carrying these tags."},
            },
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_list",
        title="Lists. Get List",
        description="Get a specific subscriber list by ID.",
        inputSchema=_id_input("List ID."),
    ),
    types.Tool(
        name="listmonk_create_list",
        title="Lists. Create List",
        description="Create a new subscriber list.",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "List name."},
                "type": {"type": "string", "enum": ["public", "private"], "default": "private"},
                "optin": {"type": "string", "enum": ["single", "double"], "default": "single"},
                "description": {"type": "string", "description": "List description."},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["name"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_update_list",
        title="Lists. Update List",
        description="Update an existing subscriber list. Fields not passed remain unchanged.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "List ID."},
                "name": {"type": "string"},
                "type": {"type": "string", "enum": ["public", "private"]},
                "optin": {"type": "string", "enum": ["single", "double"]},
                "description": {"type": "string"},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["id"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_delete_list",
        title="Lists. Delete List",
        description="Delete a subscriber list. Subscribers are kept.",
        inputSchema=_id_input("List ID."),
    ),
    # Subscribers
    types.Tool(
        name="listmonk_get_subscribers",
        title="Subscribers. Get Subscribers",
        description=(
            "Retrieve a paginated set of subscribers. `query` is an SQL expression over the "
            "subscribers table, e.g. subscribers.attribs->>'city' = 'Berlin'."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                **_PAGINATION_PROPERTIES,
                "query": {"type": "string", "description": "SQL expression to filter subscribers."},
                "list_id": {**_ID_LIST, "description": "Only subscribers of these lists."},
                "subscription_status": {
                    "type": "string",
                    "enum": ["confirmed", "unconfirmed", "unsubscribed"],
                },
            },
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_subscriber",
        title="Subscribers. Get Subscriber",
        description="Get a specific subscriber by ID, including list memberships and attributes.",
        inputSchema=_id_input("Subscriber ID."),
    ),
    types.Tool(
        name="listmonk_create_subscriber",
        title="Subscribers. Create Subscriber",
        description="Create a new subscriber and optionally subscribe them to lists.",
        inputSchema={
            "type": "object",
            "properties": {
                "email": {"type": "string", "format": "email"},
                "name": {"type": "string"},
                "status": {"type": "string", "enum": ["enabled", "blocklisted"], "default": "enabled"},
                "lists": {**_ID_LIST, "description": "IDs of lists to subscribe to."},
                "attribs": {"type": "object", "description": "Arbitrary JSON attributes.", "additionalProperties": True},
                "preconfirm_subscriptions": {
                    "type": "boolean",
                    "description": "Mark double opt-in subscriptions as confirmed without sending opt-in mail.",
                },
            },
            "required": ["email", "name"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_update_subscriber",
        title="Subscribers. Update Subscriber",
        description="Update a subscriber. `lists` replaces the subscriber's list memberships.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "Subscriber ID."},
                "email": {"type": "string", "format": "email"},
                "name": {"type": "string"},
                "status": {"type": "string", "enum": ["enabled", "blocklisted"]},
                "lists": _ID_LIST,
                "attribs": {"type": "object", "additionalProperties": True},
                "preconfirm_subscriptions": {"type": "boolean"},
            },
            "required": ["id"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_delete_subscriber",
        title="Subscribers. Delete Subscriber",
        description="Permanently delete a subscriber.",
        inputSchema=_id_input("Subscriber ID."),
    ),
    types.Tool(
        name="listmonk_manage_subscriber_lists",
        title="Subscribers. Manage List Memberships",
        description="Add subscribers to lists, remove them from lists, or unsubscribe them from lists.",
        inputSchema={
            "type": "object",
            "properties": {
                "action": {"type": "string", "enum": ["add", "remove", "unsubscribe"]},
                "ids": {**_ID_LIST, "description": "Subscriber IDs."},
                "list_ids": {**_ID_LIST, "description": "Target list IDs."},
                "status": {
                    "type": "string",
                    "enum": ["confirmed", "unconfirmed", "unsubscribed"],
                    "description": "Subscription status for action=add.",
                },
            },
            "required": ["action", "ids", "list_ids"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_blocklist_subscribers",
        title="Subscribers. Blocklist Subscribers",
        description="Blocklist subscribers. They are unsubscribed from all lists and receive no further mail.",
        inputSchema={
            "type": "object",
            "properties": {"ids": {**_ID_LIST, "description": "Subscriber IDs."}},
            "required": ["ids"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_subscriber_bounces",
        title="Subscribers. Get Bounces",
        description="Get the bounce records of one subscriber.",
        inputSchema=_id_input("Subscriber ID."),
    ),
    # Campaigns
    types.Tool(
        name="listmonk_get_campaigns",
        title="Campaigns. Get Campaigns",
        description="Retrieve a paginated set of campaigns.",
        inputSchema={
            "type": "object",
            "properties": {
                **_PAGINATION_PROPERTIES,
                "query": {"type": "string", "description": "Search string matched against campaign names and subjects."},
                "status": {
                    "type": "array",
                    "items": {
                        "type": "string",
                        "enum": ["draft", "scheduled", "running", "paused", "cancelled", "finished"],
                    },
                },
            },
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_campaign",
        title="Campaigns. Get Campaign",
        description="Get a specific campaign by ID.",
        inputSchema=_id_input("Campaign ID."),
    ),
    types.Tool(
        name="listmonk_create_campaign",
        title="Campaigns. Create Campaign",
        description="Create a draft campaign targeting one or more lists.",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "subject": {"type": "string"},
                "lists": {**_ID_LIST, "description": "Target list IDs."},
                "from_email": {"type": "string"},
                "type": {"type": "string", "enum": ["regular", "optin"], "default": "regular"},
                "content_type": {
                    "type": "string",
                    "enum": ["richtext", "html", "markdown", "plain", "visual"],
                    "default": "richtext",
                },
                "body": {"type": "string", "description": "Campaign body/content."},
                "altbody": {"type": "string", "description": "Plain text alternative body."},
                "template_id": {"type": "integer"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "send_at": {"type": "string", "description": "ISO 8601 timestamp for scheduling."},
            },
            "required": ["name", "subject", "lists"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_update_campaign",
        title="Campaigns. Update Campaign",
        description="Update a draft or paused campaign. Fields not passed remain unchanged.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "Campaign ID."},
                "name": {"type": "string"},
                "subject": {"type": "string"},
                "lists": _ID_LIST,
                "from_email": {"type": "string"},
                "content_type": {"type": "string", "enum": ["richtext", "html", "markdown", "plain", "visual"]},
                "body": {"type": "string"},
                "altbody": {"type": "string"},
                "template_id": {"type": "integer"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "send_at": {"type": "string"},
            },
            "required": ["id"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_update_campaign_status",
        title="Campaigns. Update Status",
        description="Start, schedule, pause or cancel a campaign.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "Campaign ID."},
                "status": {"type": "string", "enum": ["scheduled", "running", "paused", "cancelled"]},
            },
            "required": ["id", "status"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_delete_campaign",
        title="Campaigns. Delete Campaign",
        description="Delete a campaign.",
        inputSchema=_id_input("Campaign ID."),
    ),
    types.Tool(
        name="listmonk_test_campaign",
        title="Campaigns. Send Test",
        description="Send a campaign to a set of existing subscriber e-mail addresses for review.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "Campaign ID."},
                "emails": {"type": "array", "items": {"type": "string", "format": "email"}},
            },
            "required": ["id", "emails"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_campaign_preview",
        title="Campaigns. Preview",
        description="Render a campaign's HTML preview.",
        inputSchema=_id_input("Campaign ID."),
    ),
    types.Tool(
        name="listmonk_get_running_campaign_stats",
        title="Campaigns. Running Stats",
        description="Sending progress (sent, total, rate) of running campaigns.",
        inputSchema={
            "type": "object",
            "properties": {"campaign_ids": {**_ID_LIST, "description": "Campaign IDs."}},
            "required": ["campaign_ids"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_campaign_analytics",
        title="Campaigns. Analytics",
        description="View, click, bounce or link counts for campaigns over a date range.",
        inputSchema={
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ["views", "clicks", "bounces", "links"]},
                "campaign_ids": _ID_LIST,
                "from": {"type": "string", "description": "Start date, YYYY-MM-DD."},
                "to": {"type": "string", "description": "End date, YYYY-MM-DD."},
            },
            "required": ["type", "campaign_ids"],
            "additionalProperties": False,
        },
    ),
    # Templates
    types.Tool(
        name="listmonk_get_templates",
        title="Templates. Get Templates",
        description="Retrieve all templates.",
        inputSchema={
            "type": "object",
            "properties": {"no_body": {"type": "boolean", "description": "Omit template bodies."}},
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_template",
        title="Templates. Get Template",
        description="Get a specific template by ID.",
        inputSchema=_id_input("Template ID."),
    ),
    types.Tool(
        name="listmonk_create_template",
        title="Templates. Create Template",
        description="Create a campaign, campaign_visual or transactional template.",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "type": {"type": "string", "enum": ["campaign", "campaign_visual", "tx"], "default": "campaign"},
                "subject": {"type": "string", "description": "Subject line, transactional templates only."},
                "body": {"type": "string", "description": "Template body. Campaign templates must contain {{ template \"content\" . }}."},
            },
            "required": ["name", "body"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_update_template",
        title="Templates. Update Template",
        description="Update a template.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "integer", "description": "Template ID."},
                "name": {"type": "string"},
                "type": {"type": "string", "enum": ["campaign", "campaign_visual", "tx"]},
                "subject": {"type": "string"},
                "body": {"type": "string"},
            },
            "required": ["id"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_delete_template",
        title="Templates. Delete Template",
        description="Delete a template. The default template cannot be deleted.",
        inputSchema=_id_input("Template ID."),
    ),
    types.Tool(
        name="listmonk_set_default_template",
        title="Templates. Set Default",
        description="Make a template the default for new campaigns.",
        inputSchema=_id_input("Template ID."),
    ),
    # Media
    types.Tool(
        name="listmonk_get_media",
        title="Media. Get Media",
        description="Retrieve uploaded media files.",
        inputSchema={
            "type": "object",
            "properties": dict(_PAGINATION_PROPERTIES),
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_media_file",
        title="Media. Get Media File",
        description="Get a specific media file by ID.",
        inputSchema=_id_input("Media ID."),
    ),
    types.Tool(
        name="listmonk_delete_media",
        title="Media. Delete Media",
        description="Delete a media file.",
        inputSchema=_id_input("Media ID."),
    ),
    # Bounces
    types.Tool(
        name="listmonk_get_bounces",
        title="Bounces. Get Bounces",
        description="Retrieve a paginated set of bounce records.",
        inputSchema={
            "type": "object",
            "properties": {
                **_PAGINATION_PROPERTIES,
                "campaign_id": {"type": "integer"},
                "source": {"type": "string", "description": "Bounce source, e.g. api, ses, sendgrid."},
            },
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_bounce",
        title="Bounces. Get Bounce",
        description="Get a specific bounce record by ID.",
        inputSchema=_id_input("Bounce ID."),
    ),
    types.Tool(
        name="listmonk_delete_bounce",
        title="Bounces. Delete Bounce",
        description="Delete a bounce record.",
        inputSchema=_id_input("Bounce ID."),
    ),
    types.Tool(
        name="listmonk_delete_bounces",
        title="Bounces. Delete Bounces",
        description="Delete several bounce records, or all of them with all=true.",
        inputSchema={
            "type": "object",
            "properties": {
                "ids": {**_ID_LIST, "description": "Bounce IDs."},
                "all": {"type": "boolean", "description": "Delete every bounce record."},
            },
            "additionalProperties": False,
        },
    ),
    # Transactional
    types.Tool(
        name="listmonk_send_transactional_email",
        title="Transactional. Send",
        description="Send a transactional template to a subscriber identified by e-mail or ID.",
        inputSchema={
            "type": "object",
            "properties": {
                "template_id": {"type": "integer", "description": "ID of a `tx` template."},
                "subscriber_email": {"type": "string", "format": "email"},
                "subscriber_id": {"type": "integer"},
                "from_email": {"type": "string"},
                "data": {"type": "object", "description": "Data available to the template as .Tx.Data.", "additionalProperties": True},
                "messenger": {"type": "string", "default": "email"},
                "content_type": {"type": "string", "enum": ["html", "markdown", "plain"]},
            },
            "required": ["template_id"],
            "additionalProperties": False,
        },
    ),
    # Settings and system
    types.Tool(
        name="listmonk_get_settings",
        title="Settings. Get Settings",
        description="Retrieve the full Listmonk settings object. Passwords are masked.",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
    ),
    types.Tool(
        name="listmonk_update_settings",
        title="Settings. Update Settings",
        description=(
            "Replace the Listmonk settings. Fetch the current settings first and send the complete "
            "object back with changes applied. Listmonk reloads itself afterwards."
        ),
        inputSchema={
            "type": "object",
            "properties": {"settings": {"type": "object", "additionalProperties": True}},
            "required": ["settings"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="listmonk_get_server_config",
        title="System. Server Config",
        description="Get general server configuration (version, languages, messengers).",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
    ),
    types.Tool(
        name="listmonk_get_dashboard_counts",
        title="Dashboard. Counts",
        description="Subscriber, list, campaign and message totals.",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
    ),
]


@server.list_tools()
async def list_tools(_req: types.ListToolsRequest | None = None) -> types.ListToolsResult:
    return types.ListToolsResult(tools=TOOL_DEFINITIONS)


def _require(arguments: Mapping[str, Any], key: str) -> Any:
    value = arguments.get(key)
    if value in (None, "", [], {}):
        raise ValueError(f"Missing required argument '{key}'.")
    return value


def _as_ids(value: Any) -> list[int]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [int(item) for item in value]
    return [int(value)]


def _pick(arguments: Mapping[str, Any], *keys: str) -> dict[str, Any]:
    return {key: arguments[key] for key in keys if arguments.get(key) is not None}


def _client() -> ListmonkClient:
    client = getattr(server, "listmonk_client", None)
    if client is None:
        raise RuntimeError("Listmonk client not initialised.")
    return client


def _pagination_summary(payload: Any) -> str:
    if not isinstance(payload, Mapping) or "results" not in payload:
        return ""
    page = Page.model_validate(payload)
    last_page = max(1, math.ceil(page.total / page.per_page)) if page.per_page else 1
    summary = (
        f"\n\nPage {page.page} of {last_page}: {len(page.results)} result(s) shown, "
        f"{page.total} in total."
    )
    if page.page < last_page:
        summary += f" Request page={page.page + 1} for more."
    return summary


def _result(payload: Any, text: str | None = None) -> tuple[list[types.TextContent], dict[str, Any]]:
    structured = payload if isinstance(payload, dict) else {"result": payload}
    return (
        [types.TextContent(type="text", text=text if text is not None else _json(payload))],
        structured,
    )


def _listing(envelope: Mapping[str, Any]) -> tuple[list[types.TextContent], dict[str, Any]]:
    payload = envelope["data"]
    return _result(payload, _json(payload) + _pagination_summary(payload))


def _crud(
    result: CrudResult, failure: str
) -> types.CallToolResult | tuple[list[types.TextContent], dict[str, Any]]:
    if is_error_result(result):
        error = result["error"]
        message = error.get("message") if isinstance(error, Mapping) else None
        detail = create_error_from_response(
            result["response"], message if isinstance(message, str) else None, error
        )
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=f"{failure}: {detail.message}")],
            isError=True,
        )
    return _result(result["data"])


@server.call_tool()
async def call_tool(tool_name: str, arguments: dict[str, Any]) -> types.CallToolResult | tuple[Any, Any]:
    client = _client()
    arguments = dict(arguments or {})
    logger.debug("Calling tool %s", tool_name)
    try:
        if tool_name == "listmonk_health_check":
            envelope = await client.health_check()
            return _result(envelope["data"])

        if tool_name == "listmonk_get_lists":
            query = {"page": 1, "per_page": 20, **_pick(arguments, "page", "per_page", "query", "tag")}
            return _listing(await client.list.list(query=query))

        if tool_name == "listmonk_get_list":
            list_id = int(_require(arguments, "id"))
            return _crud(await client.list.get_by_id(path={"list_id": list_id}), "Failed to fetch list")

        if tool_name == "listmonk_create_list":
            body = {
                "name": str(_require(arguments, "name")),
                "type": arguments.get("type") or "private",
                "optin": arguments.get("optin") or "single",
                "description": str(arguments.get("description") or ""),
                "tags": list(arguments.get("tags") or []),
            }
            envelope = await client.list.create(body=body)
            return _result(envelope["data"])

        if tool_name == "listmonk_update_list":
            list_id = int(_require(arguments, "id"))
            body = _pick(arguments, "name", "type", "optin", "description", "tags")
            result = await client.list.update(path={"list_id": list_id}, body=body)
            return _crud(result, "Failed to update list")

        if tool_name == "listmonk_delete_list":
            list_id = int(_require(arguments, "id"))
            envelope = await client.list.delete(path={"list_id": list_id})
            return _result(envelope["data"], "List deleted successfully")

        if tool_name == "listmonk_get_subscribers":
            query = {
                "page": 1,
                "per_page": 20,
                **_pick(arguments, "page", "per_page", "query", "subscription_status"),
            }
            if arguments.get("list_id"):
                query["list_id"] = _as_ids(arguments["list_id"])
            return _listing(await client.subscriber.list(query=query))

        if tool_name == "listmonk_get_subscriber":
            subscriber_id = int(_require(arguments, "id"))
            result = await client.subscriber.get_by_id(path={"id": subscriber_id})
            return _crud(result, "Failed to fetch subscriber")

        if tool_name == "listmonk_create_subscriber":
            body = {
                "email": str(_require(arguments, "email")),
                "name": str(_require(arguments, "name")),
                "status": arguments.get("status") or "enabled",
                "lists": _as_ids(arguments.get("lists")),
                "attribs": dict(arguments.get("attribs") or {}),
                "preconfirm_subscriptions": bool(arguments.get("preconfirm_subscriptions", False)),
            }
            envelope = await client.subscriber.create(body=body)
            return _result(envelope["data"])

        if tool_name == "listmonk_update_subscriber":
            subscriber_id = int(_require(arguments, "id"))
            body = _pick(arguments, "email", "name", "status", "attribs", "preconfirm_subscriptions")
            if "lists" in arguments:
                body["lists"] = _as_ids(arguments["lists"])
            result = await client.subscriber.update(path={"id": subscriber_id}, body=body)
            return _crud(result, "Failed to update subscriber")

        if tool_name == "listmonk_delete_subscriber":
            subscriber_id = int(_require(arguments, "id"))
            envelope = await client.subscriber.delete(path={"id": subscriber_id})
            return _result(envelope["data"], "Subscriber deleted successfully")

        if tool_name == "listmonk_manage_subscriber_lists":
            action = str(_require(arguments, "action"))
            ids = _as_ids(_require(arguments, "ids"))
            list_ids = _as_ids(_require(arguments, "list_ids"))
            if action == "add":
                envelope = await client.subscriber.add_to_lists(
                    ids, list_ids, status=arguments.get("status")
                )
            elif action == "remove":
                envelope = await client.subscriber.remove_from_lists(ids, list_ids)
            elif action == "unsubscribe":
                envelope = await client.subscriber.unsubscribe_from_lists(ids, list_ids)
            else:
                raise ValueError(f"Invalid action: {action}. Valid actions: add, remove, unsubscribe")
            return _result(envelope["data"])

        if tool_name == "listmonk_blocklist_subscribers":
            envelope = await client.subscriber.blocklist(_as_ids(_require(arguments, "ids")))
            return _result(envelope["data"])

        if tool_name == "listmonk_get_subscriber_bounces":
            subscriber_id = int(_require(arguments, "id"))
            envelope = await client.subscriber.get_bounces(subscriber_id)
            return _result(envelope["data"])

        if tool_name == "listmonk_get_campaigns":
            query = {"page": 1, "per_page": 20, **_pick(arguments, "page", "per_page", "query", "status")}
            return _listing(await client.campaign.list(query=query))

        if tool_name == "listmonk_get_campaign":
            campaign_id = int(_require(arguments, "id"))
            result = await client.campaign.get_by_id(path={"id": campaign_id})
            return _crud(result, "Failed to fetch campaign")

        if tool_name == "listmonk_create_campaign":
            body = {
                "name": str(_require(arguments, "name")),
                "subject": str(_require(arguments, "subject")),
                "lists": _as_ids(_require(arguments, "lists")),
                "type": arguments.get("type") or "regular",
                "content_type": arguments.get("content_type") or "richtext",
                **_pick(
                    arguments, "from_email", "body", "altbody", "template_id", "tags", "send_at"
                ),
            }
            envelope = await client.campaign.create(body=body)
            return _result(envelope["data"])

        if tool_name == "listmonk_update_campaign":
            campaign_id = int(_require(arguments, "id"))
            body = _pick(
                arguments,
                "name",
                "subject",
                "from_email",
                "content_type",
                "body",
                "altbody",
                "template_id",
                "tags",
                "send_at",
            )
            if "lists" in arguments:
                body["lists"] = _as_ids(arguments["lists"])
            result = await client.campaign.update(path={"id": campaign_id}, body=body)
            return _crud(result, "Failed to update campaign")

        if tool_name == "listmonk_update_campaign_status":
            campaign_id = int(_require(arguments, "id"))
            status = str(_require(arguments, "status"))
            envelope = await client.campaign.update_status(campaign_id, status)
            return _result(envelope["data"])

        if tool_name == "listmonk_delete_campaign":
            campaign_id = int(_require(arguments, "id"))
            envelope = await client.campaign.delete(path={"id": campaign_id})
            return _result(envelope["data"], "Campaign deleted successfully")

        if tool_name == "listmonk_test_campaign":
            campaign_id = int(_require(arguments, "id"))
            emails = [str(email) for email in _require(arguments, "emails")]
            envelope = await client.campaign.send_test(campaign_id, emails)
            return _result(envelope["data"], f"Test campaign sent to {', '.join(emails)}")

        if tool_name == "listmonk_get_campaign_preview":
            campaign_id = int(_require(arguments, "id"))
            envelope = await client.campaign.preview(campaign_id)
            return _result(envelope["data"], str(envelope["data"]))

        if tool_name == "listmonk_get_running_campaign_stats":
            envelope = await client.campaign.running_stats(_as_ids(_require(arguments, "campaign_ids")))
            return _result(envelope["data"])

        if tool_name == "listmonk_get_campaign_analytics":
            envelope = await client.campaign.analytics(
                str(_require(arguments, "type")),
                _as_ids(_require(arguments, "campaign_ids")),
                from_date=arguments.get("from"),
                to_date=arguments.get("to"),
            )
            return _result(envelope["data"])

        if tool_name == "listmonk_get_templates":
            query = _pick(arguments, "no_body")
            envelope = await client.template.list(query=query)
            return _result(envelope["data"])

        if tool_name == "listmonk_get_template":
            template_id = int(_require(arguments, "id"))
            result = await client.template.get_by_id(path={"id": template_id})
            return _crud(result, "Failed to fetch template")

        if tool_name == "listmonk_create_template":
            body = {
                "name": str(_require(arguments, "name")),
                "type": arguments.get("type") or "campaign",
                "body": str(_require(arguments, "body")),
                **_pick(arguments, "subject"),
            }
            envelope = await client.template.create(body=body)
            return _result(envelope["data"])

        if tool_name == "listmonk_update_template":
            template_id = int(_require(arguments, "id"))
            body = _pick(arguments, "name", "type", "subject", "body")
            result = await client.template.update(path={"id": template_id}, body=body)
            return _crud(result, "Failed to update template")

        if tool_name == "listmonk_delete_template":
            template_id = int(_require(arguments, "id"))
            envelope = await client.template.delete(path={"id": template_id})
            return _result(envelope["data"], "Template deleted successfully")

        if tool_name == "listmonk_set_default_template":
            template_id = int(_require(arguments, "id"))
            envelope = await client.template.set_as_default(template_id)
            return _result(envelope["data"], "Template set as default")

        if tool_name == "listmonk_get_media":
            query = {"page": 1, "per_page": 20, **_pick(arguments, "page", "per_page")}
            return _listing(await client.media.list(query=query))

        if tool_name == "listmonk_get_media_file":
            media_id = int(_require(arguments, "id"))
            result = await client.media.get_by_id(path={"id": media_id})
            return _crud(result, "Failed to fetch media file")

        if tool_name == "listmonk_delete_media":
            media_id = int(_require(arguments, "id"))
            envelope = await client.media.delete(path={"id": media_id})
            return _result(envelope["data"], "Media file deleted successfully")

        if tool_name == "listmonk_get_bounces":
            envelope = await client.bounce.list(
                page=int(arguments.get("page") or 1),
                per_page=int(arguments.get("per_page") or 20),
                campaign_id=arguments.get("campaign_id"),
                source=arguments.get("source"),
            )
            return _listing(envelope)

        if tool_name == "listmonk_get_bounce":
            bounce_id = int(_require(arguments, "id"))
            return _crud(await client.bounce.get_by_id(bounce_id), "Failed to fetch bounce")

        if tool_name == "listmonk_delete_bounce":
            bounce_id = int(_require(arguments, "id"))
            envelope = await client.bounce.delete_by_id(bounce_id)
            return _result(envelope["data"], "Bounce deleted successfully")

        if tool_name == "listmonk_delete_bounces":
            envelope = await client.bounce.delete(
                ids=_as_ids(arguments.get("ids")),
                all_bounces=bool(arguments.get("all", False)),
            )
            return _result(envelope["data"], "Bounces deleted successfully")

        if tool_name == "listmonk_send_transactional_email":
            if not arguments.get("subscriber_email") and not arguments.get("subscriber_id"):
                raise ValueError("Provide either 'subscriber_email' or 'subscriber_id'.")
            envelope = await client.transactional.send(
                int(_require(arguments, "template_id")),
                subscriber_email=arguments.get("subscriber_email"),
                subscriber_id=arguments.get("subscriber_id"),
                from_email=arguments.get("from_email"),
                data=arguments.get("data"),
                messenger=arguments.get("messenger"),
                content_type=arguments.get("content_type"),
            )
            return _result(envelope["data"], "Transactional email sent")

        if tool_name == "listmonk_get_settings":
            envelope = await client.settings.get()
            return _result(envelope["data"])

        if tool_name == "listmonk_update_settings":
            settings = _require(arguments, "settings")
            if not isinstance(settings, Mapping):
                raise ValueError("settings must be provided as an object.")
            envelope = await client.settings.update(settings)
            return _result(envelope["data"], "Settings updated successfully")

        if tool_name == "listmonk_get_server_config":
            envelope = await client.system.config()
            return _result(envelope["data"])

        if tool_name == "listmonk_get_dashboard_counts":
            envelope = await client.dashboard.counts()
            return _result(envelope["data"])

        return types.CallToolResult(
            content=[types.TextContent(type="text", text=f"Unknown tool: {tool_name}")],
            isError=True,
        )
    except ListmonkError as exc:
        logger.warning("Tool %s failed: %s", tool_name, exc)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=f"Listmonk API error: {exc}")],
            isError=True,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Tool %s raised an unexpected error", tool_name)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=f"Tool execution error: {exc}")],
            isError=True,
        )


def configure_logging() -> None:
    # stdout carries the MCP stream.
    logging.basicConfig(
        level=os.getenv("LISTMONK_LOG_LEVEL", "INFO").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _run() -> None:
    initialization_options = server.create_initialization_options()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, initialization_options)


def main() -> None:
    configure_logging()
    anyio.run(_run)


if __name__ == "__main__":
    main()
