"""Endpoint functions for the Listmonk REST API.

One coroutine per endpoint. Every function takes the transport as ``client``
and forwards the request options (``path``, ``query``, ``body``, ``files``,
``data``) untouched, returning the raw ``{data|error, request, response}``
mapping. Names follow the convention the resource façade relies on:
``create_<resource>``, ``get_<plural>``, ``get_<resource>_by_id``,
``update_<resource>_by_id`` and ``delete_<resource>_by_id``.

``OPERATIONS`` is the name -> function table handed to the façade.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from listmonk_ops.client import ListmonkHTTPClient

Result = Dict[str, Any]
EndpointFunction = Callable[..., Awaitable[Result]]


# Miscellaneous


async def get_health_check(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/health", **options)


async def get_server_config(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/config", **options)


async def get_logs(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/logs", **options)


async def reload_app(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/admin/reload", **options)


async def get_dashboard_charts(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/dashboard/charts", **options)


async def get_dashboard_counts(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/dashboard/counts", **options)


# Settings


async def get_settings(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/settings", **options)


async def update_settings(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/settings", **options)


async def test_smtp_settings(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/settings/smtp/test", **options)


# Lists


async def create_list(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/lists", **options)


async def get_lists(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/lists", **options)


async def get_list_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/lists/{list_id}", **options)


async def update_list_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/lists/{list_id}", **options)


async def delete_list_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/lists/{list_id}", **options)


# Subscribers


async def create_subscriber(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/subscribers", **options)


async def get_subscribers(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/subscribers", **options)


async def get_subscriber_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/subscribers/{id}", **options)


async def update_subscriber_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/subscribers/{id}", **options)


async def delete_subscriber_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/subscribers/{id}", **options)


async def manage_subscriber_lists(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    """Add, remove or unsubscribe a set of subscriber ids on target lists."""
    return await client.request("PUT", "/subscribers/lists", **options)


async def manage_subscriber_lists_by_query(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    """Same as ``manage_subscriber_lists`` for subscribers matching an SQL expression."""
    return await client.request("PUT", "/subscribers/query/lists", **options)


async def blocklist_subscribers(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/subscribers/blocklist", **options)


async def blocklist_subscriber_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/subscribers/{id}/blocklist", **options)


async def blocklist_subscribers_by_query(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/subscribers/query/blocklist", **options)


async def export_subscriber_data_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/subscribers/{id}/export", **options)


async def send_subscriber_optin_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/subscribers/{id}/optin", **options)


async def get_subscriber_bounces_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/subscribers/{id}/bounces", **options)


async def delete_subscriber_bounces_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/subscribers/{id}/bounces", **options)


# Import


async def get_import_subscribers(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/import/subscribers", **options)


async def import_subscribers(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    """Start an import. Expects multipart ``files`` and a ``params`` form field."""
    return await client.request("POST", "/import/subscribers", **options)


async def stop_import_subscribers(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/import/subscribers", **options)


async def get_import_subscriber_logs(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/import/subscribers/logs", **options)


# Bounces


async def get_bounces(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/bounces", **options)


async def delete_bounces(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/bounces", **options)


async def get_bounce_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/bounces/{id}", **options)


async def delete_bounce_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/bounces/{id}", **options)


# Campaigns


async def create_campaign(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/campaigns", **options)


async def get_campaigns(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/campaigns", **options)


async def get_campaign_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/campaigns/{id}", **options)


async def update_campaign_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/campaigns/{id}", **options)


async def delete_campaign_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/campaigns/{id}", **options)


async def get_campaign_preview_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/campaigns/{id}/preview", **options)


async def preview_campaign_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    """Render a preview from a body supplied in the request instead of the stored one."""
    return await client.request("POST", "/campaigns/{id}/preview", **options)


async def preview_campaign_text_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/campaigns/{id}/text", **options)


async def update_campaign_status_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/campaigns/{id}/status", **options)


async def update_campaign_archive_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/campaigns/{id}/archive", **options)


async def update_campaign_content_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    """Convert the campaign body between content formats (html, richtext, markdown, plain)."""
    return await client.request("POST", "/campaigns/{id}/content", **options)


async def test_campaign_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/campaigns/{id}/test", **options)


async def get_running_campaign_stats(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/campaigns/running/stats", **options)


async def get_campaign_analytics(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/campaigns/analytics/{type}", **options)


# Templates


async def create_template(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/templates", **options)


async def get_templates(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/templates", **options)


async def get_template_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/templates/{id}", **options)


async def update_template_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/templates/{id}", **options)


async def delete_template_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/templates/{id}", **options)


async def update_template_default_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("PUT", "/templates/{id}/default", **options)


async def get_template_preview_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/templates/{id}/preview", **options)


# Media


async def get_media(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/media", **options)


async def upload_media(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/media", **options)


async def get_media_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("GET", "/media/{id}", **options)


async def delete_media_by_id(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("DELETE", "/media/{id}", **options)


# Transactional


async def transact_with_subscriber(*, client: ListmonkHTTPClient, **options: Any) -> Result:
    return await client.request("POST", "/tx", **options)


OPERATIONS: Dict[str, EndpointFunction] = {
    function.__name__: function
    for function in (
        get_health_check,
        get_server_config,
        get_logs,
        reload_app,
        get_dashboard_charts,
        get_dashboard_counts,
        get_settings,
        update_settings,
        test_smtp_settings,
        create_list,
        get_lists,
        get_list_by_id,
        update_list_by_id,
        delete_list_by_id,
        create_subscriber,
        get_subscribers,
        get_subscriber_by_id,
        update_subscriber_by_id,
        delete_subscriber_by_id,
        manage_subscriber_lists,
        manage_subscriber_lists_by_query,
        blocklist_subscribers,
        blocklist_subscriber_by_id,
        blocklist_subscribers_by_query,
        export_subscriber_data_by_id,
        send_subscriber_optin_by_id,
        get_subscriber_bounces_by_id,
        delete_subscriber_bounces_by_id,
        get_import_subscribers,
        import_subscribers,
        stop_import_subscribers,
        get_import_subscriber_logs,
        get_bounces,
        delete_bounces,
        get_bounce_by_id,
        delete_bounce_by_id,
        create_campaign,
        get_campaigns,
        get_campaign_by_id,
        update_campaign_by_id,
        delete_campaign_by_id,
        get_campaign_preview_by_id,
        preview_campaign_by_id,
        preview_campaign_text_by_id,
        update_campaign_status_by_id,
        update_campaign_archive_by_id,
        update_campaign_content_by_id,
        test_campaign_by_id,
        get_running_campaign_stats,
        get_campaign_analytics,
        create_template,
        get_templates,
        get_template_by_id,
        update_template_by_id,
        delete_template_by_id,
        update_template_default_by_id,
        get_template_preview_by_id,
        get_media,
        upload_media,
        get_media_by_id,
        delete_media_by_id,
        transact_with_subscriber,
    )
}
