"""The Listmonk client façade.

``ListmonkClient`` composes one ``ResourceOperations`` per conventional
resource with hand-mapped namespaces for the endpoints that do not fit the
create/list/get/update/delete pattern. Construction binds every endpoint
function up front and performs no I/O.
"""

from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO, Iterable, Mapping, Optional, Union

import httpx

from listmonk_ops.client import ListmonkHTTPClient
from listmonk_ops.config import ListmonkConfig, resolve_config, validate_config
from listmonk_ops.models import CrudResult, Envelope
from listmonk_ops.operations import OperationNamespace, ResourceDescriptor, ResourceOperations
from listmonk_ops.sdk import OPERATIONS, EndpointFunction

logger = logging.getLogger(__name__)

FileContent = Union[bytes, BinaryIO]


def _ids(values: Iterable[Any]) -> list[int]:
    return [int(value) for value in values]


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class SubscriberOperations(ResourceOperations):
    operations = (
        "manage_subscriber_lists",
        "manage_subscriber_lists_by_query",
        "blocklist_subscribers",
        "blocklist_subscriber_by_id",
        "blocklist_subscribers_by_query",
        "export_subscriber_data_by_id",
        "send_subscriber_optin_by_id",
        "get_subscriber_bounces_by_id",
        "delete_subscriber_bounces_by_id",
    )

    async def _manage_lists(
        self,
        action: str,
        ids: Iterable[Any],
        list_ids: Iterable[Any],
        status: Optional[str] = None,
    ) -> Envelope:
        body = _compact(
            {
                "ids": _ids(ids),
                "action": action,
                "target_list_ids": _ids(list_ids),
                "status": status,
            }
        )
        return await self._invoke("manage_subscriber_lists", body=body)

    async def _manage_lists_by_query(
        self,
        action: str,
        query: str,
        list_ids: Iterable[Any],
        source_list_ids: Optional[Iterable[Any]] = None,
        status: Optional[str] = None,
    ) -> Envelope:
        body = _compact(
            {
                "query": query,
                "list_ids": _ids(source_list_ids) if source_list_ids is not None else None,
                "action": action,
                "target_list_ids": _ids(list_ids),
                "status": status,
            }
        )
        return await self._invoke("manage_subscriber_lists_by_query", body=body)

    async def add_to_lists(
        self, ids: Iterable[Any], list_ids: Iterable[Any], *, status: Optional[str] = None
    ) -> Envelope:
        """Subscribe ``ids`` to ``list_ids`` (status: confirmed, unconfirmed, unsubscribed)."""
        return await self._manage_lists("add", ids, list_ids, status)

    async def remove_from_lists(self, ids: Iterable[Any], list_ids: Iterable[Any]) -> Envelope:
        return await self._manage_lists("remove", ids, list_ids)

    async def unsubscribe_from_lists(self, ids: Iterable[Any], list_ids: Iterable[Any]) -> Envelope:
        return await self._manage_lists("unsubscribe", ids, list_ids)

    async def add_to_lists_by_query(
        self,
        query: str,
        list_ids: Iterable[Any],
        *,
        source_list_ids: Optional[Iterable[Any]] = None,
        status: Optional[str] = None,
    ) -> Envelope:
        return await self._manage_lists_by_query("add", query, list_ids, source_list_ids, status)

    async def remove_from_lists_by_query(
        self,
        query: str,
        list_ids: Iterable[Any],
        *,
        source_list_ids: Optional[Iterable[Any]] = None,
    ) -> Envelope:
        return await self._manage_lists_by_query("remove", query, list_ids, source_list_ids)

    async def unsubscribe_from_lists_by_query(
        self,
        query: str,
        list_ids: Iterable[Any],
        *,
        source_list_ids: Optional[Iterable[Any]] = None,
    ) -> Envelope:
        return await self._manage_lists_by_query("unsubscribe", query, list_ids, source_list_ids)

    async def blocklist(self, ids: Iterable[Any]) -> Envelope:
        return await self._invoke("blocklist_subscribers", body={"ids": _ids(ids)})

    async def blocklist_by_id(self, subscriber_id: int) -> Envelope:
        return await self._invoke("blocklist_subscriber_by_id", path={"id": subscriber_id})

    async def blocklist_by_query(
        self, query: str, *, list_ids: Optional[Iterable[Any]] = None
    ) -> Envelope:
        body = _compact({"query": query, "list_ids": _ids(list_ids) if list_ids else None})
        return await self._invoke("blocklist_subscribers_by_query", body=body)

    async def export_data(self, subscriber_id: int) -> Envelope:
        """Export everything Listmonk stores about a subscriber (profile, lists, views, clicks)."""
        return await self._invoke("export_subscriber_data_by_id", path={"id": subscriber_id})

    async def send_optin(self, subscriber_id: int) -> Envelope:
        return await self._invoke("send_subscriber_optin_by_id", path={"id": subscriber_id})

    async def get_bounces(self, subscriber_id: int) -> Envelope:
        return await self._invoke("get_subscriber_bounces_by_id", path={"id": subscriber_id})

    async def delete_bounces(self, subscriber_id: int) -> Envelope:
        return await self._invoke("delete_subscriber_bounces_by_id", path={"id": subscriber_id})


class CampaignOperations(ResourceOperations):
    operations = (
        "get_campaign_preview_by_id",
        "preview_campaign_by_id",
        "preview_campaign_text_by_id",
        "update_campaign_status_by_id",
        "update_campaign_archive_by_id",
        "update_campaign_content_by_id",
        "test_campaign_by_id",
        "get_running_campaign_stats",
        "get_campaign_analytics",
    )

    async def preview(self, campaign_id: int) -> Envelope:
        """Render the stored campaign body as HTML."""
        return await self._invoke("get_campaign_preview_by_id", path={"id": campaign_id})

    async def render_preview(
        self,
        campaign_id: int,
        *,
        body: str,
        content_type: Optional[str] = None,
        template_id: Optional[int] = None,
    ) -> Envelope:
        """Render an unsaved body against the campaign."""
        form = _compact({"body": body, "content_type": content_type, "template_id": template_id})
        return await self._invoke("preview_campaign_by_id", path={"id": campaign_id}, data=form)

    async def preview_text(
        self,
        campaign_id: int,
        *,
        body: str,
        content_type: Optional[str] = None,
    ) -> Envelope:
        form = _compact({"body": body, "content_type": content_type})
        return await self._invoke(
            "preview_campaign_text_by_id", path={"id": campaign_id}, data=form
        )

    async def update_status(self, campaign_id: int, status: str) -> Envelope:
        """Move a campaign to scheduled, running, paused or cancelled."""
        return await self._invoke(
            "update_campaign_status_by_id", path={"id": campaign_id}, body={"status": status}
        )

    async def set_archive(
        self,
        campaign_id: int,
        archive: bool,
        *,
        archive_template_id: Optional[int] = None,
        archive_meta: Optional[Mapping[str, Any]] = None,
        archive_slug: Optional[str] = None,
    ) -> Envelope:
        body = _compact(
            {
                "archive": archive,
                "archive_template_id": archive_template_id,
                "archive_meta": dict(archive_meta) if archive_meta is not None else None,
                "archive_slug": archive_slug,
            }
        )
        return await self._invoke("update_campaign_archive_by_id", path={"id": campaign_id}, body=body)

    async def update_content(self, campaign_id: int, content: Mapping[str, Any]) -> Envelope:
        return await self._invoke(
            "update_campaign_content_by_id", path={"id": campaign_id}, body=dict(content)
        )

    async def send_test(
        self, campaign_id: int, emails: Iterable[str], **fields: Any
    ) -> Envelope:
        """Send the campaign to ``emails``. Extra ``fields`` override the stored campaign."""
        body = {**_compact(fields), "subscribers": [str(email) for email in emails]}
        return await self._invoke("test_campaign_by_id", path={"id": campaign_id}, body=body)

    async def running_stats(self, campaign_ids: Iterable[Any]) -> Envelope:
        return await self._invoke(
            "get_running_campaign_stats", query={"campaign_id": _ids(campaign_ids)}
        )

    async def analytics(
        self,
        kind: str,
        campaign_ids: Iterable[Any],
        *,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> Envelope:
        """Counts over time; ``kind`` is views, clicks, bounces or links."""
        query = _compact({"id": _ids(campaign_ids), "from": from_date, "to": to_date})
        return await self._invoke("get_campaign_analytics", path={"type": kind}, query=query)


class TemplateOperations(ResourceOperations):
    operations = ("update_template_default_by_id", "get_template_preview_by_id")

    async def set_as_default(self, template_id: int) -> Envelope:
        return await self._invoke("update_template_default_by_id", path={"id": template_id})

    async def preview(self, template_id: int) -> Envelope:
        return await self._invoke("get_template_preview_by_id", path={"id": template_id})


class MediaOperations(ResourceOperations):
    operations = ("upload_media",)

    async def upload(
        self,
        file: FileContent,
        *,
        filename: str,
        content_type: Optional[str] = None,
    ) -> Envelope:
        upload = (filename, file, content_type) if content_type else (filename, file)
        return await self._invoke("upload_media", files={"file": upload})


class ImportOperations(OperationNamespace):
    operations = (
        "get_import_subscribers",
        "import_subscribers",
        "stop_import_subscribers",
        "get_import_subscriber_logs",
    )

    async def status(self) -> Envelope:
        return await self._invoke("get_import_subscribers")

    async def start(
        self,
        file: FileContent,
        *,
        lists: Iterable[Any],
        mode: str = "subscribe",
        delim: str = ",",
        overwrite: bool = False,
        subscription_status: Optional[str] = None,
        filename: str = "subscribers.csv",
    ) -> Envelope:
        """Upload a CSV (or zipped CSV) of subscribers. ``mode`` is subscribe or blocklist."""
        params = _compact(
            {
                "mode": mode,
                "delim": delim,
                "lists": _ids(lists),
                "overwrite": overwrite,
                "subscription_status": subscription_status,
            }
        )
        return await self._invoke(
            "import_subscribers",
            data={"params": json.dumps(params)},
            files={"file": (filename, file)},
        )

    async def stop(self) -> Envelope:
        return await self._invoke("stop_import_subscribers")

    async def logs(self) -> Envelope:
        return await self._invoke("get_import_subscriber_logs")


class BounceOperations(OperationNamespace):
    operations = ("get_bounces", "get_bounce_by_id", "delete_bounces", "delete_bounce_by_id")

    async def list(
        self,
        *,
        campaign_id: Optional[int] = None,
        page: Optional[int] = None,
        per_page: Union[int, str, None] = None,
        source: Optional[str] = None,
        order_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> Envelope:
        query = _compact(
            {
                "campaign_id": campaign_id,
                "page": page,
                "per_page": per_page,
                "source": source,
                "order_by": order_by,
                "order": order,
            }
        )
        return await self._invoke("get_bounces", query=query)

    async def get_by_id(self, bounce_id: int) -> CrudResult:
        return await self._invoke("get_bounce_by_id", as_crud=True, path={"id": bounce_id})

    async def delete(
        self, *, ids: Optional[Iterable[Any]] = None, all_bounces: bool = False
    ) -> Envelope:
        if not all_bounces and not ids:
            raise ValueError("Pass bounce ids or all_bounces=True.")
        query = {"all": True} if all_bounces else {"id": _ids(ids or ())}
        return await self._invoke("delete_bounces", query=query)

    async def delete_by_id(self, bounce_id: int) -> Envelope:
        return await self._invoke("delete_bounce_by_id", path={"id": bounce_id})


class TransactionalOperations(OperationNamespace):
    operations = ("transact_with_subscriber",)

    async def send(
        self,
        template_id: int,
        *,
        subscriber_email: Optional[str] = None,
        subscriber_id: Optional[int] = None,
        subscriber_emails: Optional[Iterable[str]] = None,
        subscriber_ids: Optional[Iterable[Any]] = None,
        from_email: Optional[str] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[list[dict[str, str]]] = None,
        messenger: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> Envelope:
        """Send a transactional template to one or more subscribers."""
        body = _compact(
            {
                "template_id": int(template_id),
                "subscriber_email": subscriber_email,
                "subscriber_id": subscriber_id,
                "subscriber_emails": list(subscriber_emails) if subscriber_emails else None,
                "subscriber_ids": _ids(subscriber_ids) if subscriber_ids else None,
                "from_email": from_email,
                "data": dict(data) if data is not None else None,
                "headers": headers,
                "messenger": messenger,
                "content_type": content_type,
            }
        )
        return await self._invoke("transact_with_subscriber", body=body)


class SettingsOperations(OperationNamespace):
    operations = ("get_settings", "update_settings", "test_smtp_settings")

    async def get(self) -> Envelope:
        return await self._invoke("get_settings")

    async def update(self, settings: Mapping[str, Any]) -> Envelope:
        return await self._invoke("update_settings", body=dict(settings))

    async def test_smtp(self, smtp: Mapping[str, Any]) -> Envelope:
        return await self._invoke("test_smtp_settings", body=dict(smtp))


class DashboardOperations(OperationNamespace):
    operations = ("get_dashboard_charts", "get_dashboard_counts")

    async def charts(self) -> Envelope:
        return await self._invoke("get_dashboard_charts")

    async def counts(self) -> Envelope:
        return await self._invoke("get_dashboard_counts")


class SystemOperations(OperationNamespace):
    operations = ("get_health_check", "get_server_config", "get_logs", "reload_app")

    async def health(self) -> Envelope:
        return await self._invoke("get_health_check")

    async def config(self) -> Envelope:
        return await self._invoke("get_server_config")

    async def logs(self) -> Envelope:
        return await self._invoke("get_logs")

    async def reload(self) -> Envelope:
        return await self._invoke("reload_app")


LIST = ResourceDescriptor.for_resource("list")
SUBSCRIBER = ResourceDescriptor.for_resource("subscriber")
CAMPAIGN = ResourceDescriptor.for_resource("campaign")
TEMPLATE = ResourceDescriptor.for_resource("template")
# Media is created through the multipart upload endpoint and cannot be edited.
MEDIA = ResourceDescriptor.for_resource("media", "media", unsupported=("create", "update"))


class ListmonkClient:
    """Resource-oriented async client for the Listmonk API.

    Every call returns a flattened envelope. ``get_by_id``/``update`` on the
    resource namespaces may return ``{"error": ...}`` instead (see
    ``listmonk_ops.models.is_error_result``); every other failure is raised
    as a ``ListmonkError`` subclass.
    """

    def __init__(
        self,
        http_client: ListmonkHTTPClient,
        table: Mapping[str, EndpointFunction] = OPERATIONS,
        *,
        config: Optional[ListmonkConfig] = None,
    ) -> None:
        self.config = config
        self._http_client = http_client
        base_options = {"client": http_client}

        self.list = ResourceOperations(LIST, table, base_options)
        self.subscriber = SubscriberOperations(SUBSCRIBER, table, base_options)
        self.campaign = CampaignOperations(CAMPAIGN, table, base_options)
        self.template = TemplateOperations(TEMPLATE, table, base_options)
        self.media = MediaOperations(MEDIA, table, base_options)

        self.imports = ImportOperations(table, base_options)
        self.bounce = BounceOperations(table, base_options)
        self.transactional = TransactionalOperations(table, base_options)
        self.settings = SettingsOperations(table, base_options)
        self.dashboard = DashboardOperations(table, base_options)
        self.system = SystemOperations(table, base_options)

    async def health_check(self) -> Envelope:
        return await self.system.health()

    async def aclose(self) -> None:
        await self._http_client.close()

    async def __aenter__(self) -> "ListmonkClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def create_listmonk_client(
    overrides: Union[ListmonkConfig, Mapping[str, Any], None] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    table: Optional[Mapping[str, EndpointFunction]] = None,
) -> ListmonkClient:
    """Resolve configuration and assemble a ``ListmonkClient``.

    ``overrides`` may be a ready ``ListmonkConfig`` or a partial mapping
    (``base_url``, ``auth``, ``timeout``, ``retries``, ``headers``) merged
    over the environment and defaults. Invalid configuration raises
    ``ConfigurationError`` here, before any request is made.
    """
    config = overrides if isinstance(overrides, ListmonkConfig) else resolve_config(overrides)
    validate_config(config)

    http_client = ListmonkHTTPClient.from_config(config, transport=transport)
    logger.debug("Listmonk client configured for %s as %s", config.base_url, config.auth.username)
    return ListmonkClient(http_client, OPERATIONS if table is None else table, config=config)
