"""
Plugin lifecycle

Activation and deactivation both flush the REST route table so the
registered endpoints resolve, then notify the technical contact by email.
Mail failures are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from attachments_inspector.plugins.registry import PluginState
from attachments_inspector.services.email_service import EmailService, email_service

if TYPE_CHECKING:
    from attachments_inspector.plugins.registry import PluginRegistry
    from attachments_inspector.routes.endpoints import EndpointRegistry

logger = logging.getLogger(__name__)


def _notify(mailer: EmailService, event: str) -> None:
    if not mailer.send_lifecycle_notification(event):
        logger.warning("Lifecycle notification '%s' was not delivered", event)


class PluginActivator:
    """The code that runs during plugin activation."""

    @staticmethod
    def activate(
        plugins: PluginRegistry,
        endpoints: EndpointRegistry,
        mailer: EmailService | None = None,
    ) -> bool:
        """
        Activate the plugin.

        Returns:
            bool: False when the plugin was already active.
        """
        if plugins.state == PluginState.ACTIVE:
            logger.debug("Plugin already active")
            return False

        routes = endpoints.flush()
        plugins.state = PluginState.ACTIVE
        logger.info("Attachments inspector activated (%d routes)", routes)

        _notify(mailer or email_service, "activated")
        return True


class PluginDeactivator:
    """The code that runs during plugin deactivation."""

    @staticmethod
    def deactivate(
        plugins: PluginRegistry,
        endpoints: EndpointRegistry,
        mailer: EmailService | None = None,
    ) -> bool:
        """
        Deactivate the plugin.

        Returns:
            bool: False when the plugin was not active.
        """
        if plugins.state == PluginState.INACTIVE:
            logger.debug("Plugin already inactive")
            return False

        endpoints.flush()
        plugins.state = PluginState.INACTIVE
        logger.info("Attachments inspector deactivated")

        _notify(mailer or email_service, "deactivated")
        return True
