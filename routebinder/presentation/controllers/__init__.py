"""Controllers bound by the route binder."""

from routebinder.presentation.controllers.base import Controller
from routebinder.presentation.controllers.devices import DevicesController
from routebinder.presentation.controllers.events import EventsController
from routebinder.presentation.controllers.provisioning import ProvisioningController
from routebinder.presentation.controllers.users import UsersController

__all__ = [
    "Controller",
    "DevicesController",
    "EventsController",
    "ProvisioningController",
    "UsersController",
]
