"""Route scanner: controller route tables -> RouteBinding list.

Runs once at startup. For every controller name the shared instance is
resolved from the container and the ``routes`` table declared directly on
its class is validated and converted. Tables inherited from a base class
are ignored, so helper methods on the Controller base are never routed.

Any inconsistency is a RouteConfigurationError, which aborts startup.
"""

import inspect
from collections.abc import Iterable, Sequence

from routebinder.core.container import Container
from routebinder.core.errors import RouteConfigurationError
from routebinder.domain.protocols import LoggerProtocol
from routebinder.presentation.routing.metadata import (
    PARAMETER_PATTERN,
    RouteBinding,
    RouteMetadata,
    parse_route,
)

ROUTES_ATTRIBUTE = "routes"


def scan_controllers(
    container: Container,
    controller_names: Iterable[str],
    logger: LoggerProtocol | None = None,
) -> list[RouteBinding]:
    """Build bindings for every routed method of the given controllers.

    Args:
        container: Container resolving controller names.
        controller_names: Controllers to scan, in registration order.
        logger: Optional logger for per-binding debug output.

    Returns:
        Bindings in controller order, then route-table order.

    Raises:
        RouteConfigurationError: On malformed tables, patterns or upload
            specs, unknown handlers, or duplicate method + path pairs.
    """
    bindings: list[RouteBinding] = []
    seen: dict[str, str] = {}

    for controller_name in controller_names:
        controller = container.constitute(controller_name)
        for metadata in _route_table(controller, controller_name):
            binding = _bind(controller, controller_name, metadata)

            shape = f"{binding.method.value} {PARAMETER_PATTERN.sub(':', binding.route)}"
            if shape in seen:
                raise RouteConfigurationError(
                    f"{binding.method.value} {binding.route} is already bound by {seen[shape]}",
                    controller=controller_name,
                )
            seen[shape] = binding.operation_id

            if logger is not None:
                logger.debug(
                    "Route scanned",
                    method=binding.method.value,
                    route=binding.route,
                    handler=binding.operation_id,
                )
            bindings.append(binding)

    return bindings


def _route_table(controller: object, controller_name: str) -> Sequence[RouteMetadata]:
    table = vars(type(controller)).get(ROUTES_ATTRIBUTE, ())
    if not isinstance(table, (list, tuple)):
        raise RouteConfigurationError(
            f"'{ROUTES_ATTRIBUTE}' must be a list of RouteMetadata",
            controller=controller_name,
        )
    for entry in table:
        if not isinstance(entry, RouteMetadata):
            raise RouteConfigurationError(
                f"'{ROUTES_ATTRIBUTE}' entry {entry!r} is not RouteMetadata",
                controller=controller_name,
            )
    return table


def _bind(controller: object, controller_name: str, metadata: RouteMetadata) -> RouteBinding:
    handler = vars(type(controller)).get(metadata.handler)
    if handler is None or not inspect.isfunction(handler):
        raise RouteConfigurationError(
            f"handler '{metadata.handler}' is not a method defined on {type(controller).__name__}",
            controller=controller_name,
        )

    try:
        path, parameter_names = parse_route(metadata.path)
    except ValueError as e:
        raise RouteConfigurationError(str(e), controller=controller_name) from e

    if metadata.allowed_uploads is not None:
        names = [field.name for field in metadata.allowed_uploads]
        if len(names) != len(set(names)):
            raise RouteConfigurationError(
                f"upload fields of '{metadata.handler}' must be unique",
                controller=controller_name,
            )
        if any(field.max_count < 1 for field in metadata.allowed_uploads):
            raise RouteConfigurationError(
                f"upload max_count of '{metadata.handler}' must be at least 1",
                controller=controller_name,
            )

    return RouteBinding(
        controller_name=controller_name,
        handler_name=metadata.handler,
        method=metadata.method,
        route=metadata.path,
        path=path,
        parameter_names=parameter_names,
        anonymous=metadata.anonymous,
        allowed_uploads=metadata.allowed_uploads,
        server_sent_events=metadata.server_sent_events,
        summary=metadata.summary,
    )
