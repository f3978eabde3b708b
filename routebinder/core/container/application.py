"""Application composition root.

build_container() registers every service and controller of the
application under its string name. Controllers are shared singletons:
they hold only injected collaborators, never request state.

Registered names:
    Settings, Logger, PasswordService, UserRepository, DeviceRepository,
    DeviceKeyRepository, EventPublisher, OAuthServer, Dispatcher,
    UsersController, ProvisioningController, DevicesController,
    EventsController
"""

from routebinder.core.config import Settings, get_settings
from routebinder.core.container.infrastructure import (
    get_logger,
    get_oauth_server,
    get_password_service,
)
from routebinder.core.container.registry import Container

CONTROLLER_NAMES: tuple[str, ...] = (
    "UsersController",
    "ProvisioningController",
    "DevicesController",
    "EventsController",
)


def build_container(settings: Settings | None = None) -> Container:
    """Create a container with the application's registrations.

    Args:
        settings: Settings to register (defaults to get_settings()).

    Returns:
        Container ready for route scanning.
    """
    from routebinder.infrastructure.events import EventPublisher
    from routebinder.infrastructure.persistence import (
        InMemoryDeviceKeyRepository,
        InMemoryDeviceRepository,
        InMemoryUserRepository,
    )
    from routebinder.presentation.controllers import (
        DevicesController,
        EventsController,
        ProvisioningController,
        UsersController,
    )
    from routebinder.presentation.routing.dispatcher import Dispatcher

    container = Container()
    container.register_instance("Settings", settings or get_settings())

    # Infrastructure
    container.register("Logger", lambda c: get_logger(c.constitute("Settings")))
    container.register(
        "PasswordService", lambda c: get_password_service(c.constitute("Settings"))
    )
    container.register("UserRepository", lambda c: InMemoryUserRepository())
    container.register("DeviceRepository", lambda c: InMemoryDeviceRepository())
    container.register("DeviceKeyRepository", lambda c: InMemoryDeviceKeyRepository())
    container.register("EventPublisher", lambda c: EventPublisher())
    container.register("OAuthServer", get_oauth_server)
    container.register(
        "Dispatcher",
        lambda c: Dispatcher(c, c.constitute("Settings"), c.constitute("Logger")),
    )

    # Controllers
    container.register(
        "UsersController",
        lambda c: UsersController(
            user_repository=c.constitute("UserRepository"),
            password_service=c.constitute("PasswordService"),
            logger=c.constitute("Logger"),
        ),
    )
    container.register(
        "ProvisioningController",
        lambda c: ProvisioningController(
            device_repository=c.constitute("DeviceRepository"),
            key_repository=c.constitute("DeviceKeyRepository"),
            publisher=c.constitute("EventPublisher"),
            logger=c.constitute("Logger"),
        ),
    )
    container.register(
        "DevicesController",
        lambda c: DevicesController(
            device_repository=c.constitute("DeviceRepository"),
            key_repository=c.constitute("DeviceKeyRepository"),
        ),
    )
    container.register(
        "EventsController",
        lambda c: EventsController(publisher=c.constitute("EventPublisher")),
    )

    return container
