"""Resource operation sets bound to endpoint functions by naming convention.

A ``ResourceDescriptor`` names the five conventional endpoint functions of a
resource. ``ResourceOperations`` resolves every one of them against the
function table when it is constructed, so a missing endpoint surfaces at
startup as ``MissingOperationError`` rather than on first use.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from listmonk_ops.errors import (
    MissingOperationError,
    UnsupportedOperationError,
    create_error_from_response,
)
from listmonk_ops.models import CrudResult, Envelope, is_error_result
from listmonk_ops.sdk import EndpointFunction
from listmonk_ops.transform import transform_response

logger = logging.getLogger(__name__)

VERBS = ("create", "list", "get_by_id", "update", "delete")

# Statuses that a fetch/update reports as {"error": ...} instead of raising.
_AS_DATA_EXCLUDED = frozenset({401, 429})


class ResourceDescriptor(NamedTuple):
    resource: str
    create: Optional[str]
    list: Optional[str]
    get_by_id: Optional[str]
    update: Optional[str]
    delete: Optional[str]

    @classmethod
    def for_resource(
        cls,
        resource: str,
        plural: Optional[str] = None,
        *,
        unsupported: Iterable[str] = (),
    ) -> "ResourceDescriptor":
        """Derive endpoint names for ``resource``.

        ``for_resource("List")`` gives ``create_list``, ``get_lists``,
        ``get_list_by_id``, ``update_list_by_id`` and ``delete_list_by_id``.
        Verbs listed in ``unsupported`` are recorded as ``None``.
        """
        name = resource.lower()
        plural_name = (plural or f"{name}s").lower()
        names: dict[str, Optional[str]] = {
            "create": f"create_{name}",
            "list": f"get_{plural_name}",
            "get_by_id": f"get_{name}_by_id",
            "update": f"update_{name}_by_id",
            "delete": f"delete_{name}_by_id",
        }
        for verb in unsupported:
            if verb not in names:
                raise ValueError(f"Unknown operation verb: {verb}")
            names[verb] = None
        return cls(resource=name, **names)

    def operation_names(self) -> list[str]:
        return [name for name in (getattr(self, verb) for verb in VERBS) if name]


def _error_message(payload: Any) -> Optional[str]:
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _error_is_data(status_code: int) -> bool:
    return 400 <= status_code < 500 and status_code not in _AS_DATA_EXCLUDED


class OperationNamespace:
    """A group of endpoint functions resolved from the table at construction.

    Subclasses list the endpoint names they call in ``operations`` and reach
    them through ``_invoke``, which merges the base options with the caller's
    and normalizes the result.
    """

    operations: tuple[str, ...] = ()

    def __init__(
        self,
        table: Mapping[str, EndpointFunction],
        base_options: Mapping[str, Any],
        *,
        names: Iterable[str] = (),
    ) -> None:
        self._base_options = dict(base_options)
        self._functions: dict[str, EndpointFunction] = {}
        for name in (*names, *self.operations):
            function = table.get(name)
            if not callable(function):
                raise MissingOperationError(name)
            self._functions[name] = function

    def _merge(self, options: Mapping[str, Any]) -> dict[str, Any]:
        merged = dict(self._base_options)
        merged.update((key, value) for key, value in options.items() if value is not None)
        return merged

    async def _invoke(self, name: str, *, as_crud: bool = False, **options: Any) -> Any:
        function = self._functions[name]
        result = await function(**self._merge(options))

        if isinstance(result, Mapping) and is_error_result(result):
            response = result["response"]
            if as_crud and _error_is_data(response.status_code):
                logger.debug("%s returned HTTP %s as data", name, response.status_code)
                return transform_response(result)
            payload = result["error"]
            raise create_error_from_response(response, _error_message(payload), payload)
        return transform_response(result)


class ResourceOperations(OperationNamespace):
    """Create/list/get/update/delete for one resource.

    ``get_by_id`` and ``update`` return ``{"error": ...}`` for client-side
    failures such as a missing entity; the other verbs raise.
    """

    def __init__(
        self,
        descriptor: ResourceDescriptor,
        table: Mapping[str, EndpointFunction],
        base_options: Mapping[str, Any],
    ) -> None:
        self.descriptor = descriptor
        super().__init__(table, base_options, names=descriptor.operation_names())

    async def _verb(self, verb: str, options: Mapping[str, Any], *, as_crud: bool = False) -> Any:
        name = getattr(self.descriptor, verb)
        if name is None:
            raise UnsupportedOperationError(
                f"{self.descriptor.resource} does not support {verb}"
            )
        return await self._invoke(name, as_crud=as_crud, **options)

    async def create(self, **options: Any) -> Envelope:
        return await self._verb("create", options)

    async def list(self, **options: Any) -> Envelope:
        return await self._verb("list", options)

    async def get_by_id(self, **options: Any) -> CrudResult:
        return await self._verb("get_by_id", options, as_crud=True)

    async def update(self, **options: Any) -> CrudResult:
        return await self._verb("update", options, as_crud=True)

    async def delete(self, **options: Any) -> Envelope:
        return await self._verb("delete", options)


def build_resource_operations(
    resource: str | ResourceDescriptor,
    table: Mapping[str, EndpointFunction],
    base_options: Mapping[str, Any],
) -> ResourceOperations:
    """Build the generic operation set for ``resource``."""
    descriptor = (
        resource
        if isinstance(resource, ResourceDescriptor)
        else ResourceDescriptor.for_resource(resource)
    )
    return ResourceOperations(descriptor, table, base_options)
