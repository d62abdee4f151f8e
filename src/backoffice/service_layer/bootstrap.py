"""
Bootstrap : assemblage de l'application (Composition Root).

Ce module construit le message bus avec toutes ses dépendances.
En production on assemble les composants concrets, en test
on injecte des fakes via les paramètres.
"""

from __future__ import annotations

from typing import Any

from backoffice.adapters import notifications, orm
from backoffice.config import Settings, get_settings
from backoffice.domain import commands, events
from backoffice.service_layer import handlers, messagebus, unit_of_work


def bootstrap(
    start_orm: bool = True,
    uow: unit_of_work.AbstractUnitOfWork | None = None,
    notifications_adapter: notifications.AbstractNotifications | None = None,
    settings: Settings | None = None,
    **extra_dependencies: Any,
) -> messagebus.MessageBus:
    """Construit et retourne un MessageBus configuré."""
    if settings is None:
        settings = get_settings()

    if start_orm:
        orm.start_mappers()

    if uow is None:
        uow = unit_of_work.SqlAlchemyUnitOfWork()

    if notifications_adapter is None:
        notifications_adapter = notifications.EmailNotifications(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            sender=settings.notification_sender,
        )

    dependencies: dict[str, Any] = {
        "notifications": notifications_adapter,
        "settings": settings,
        **extra_dependencies,
    }

    return messagebus.MessageBus(
        uow=uow,
        event_handlers=EVENT_HANDLERS,
        command_handlers=COMMAND_HANDLERS,
        dependencies=dependencies,
    )


# --- Routage des messages vers les handlers ---

EVENT_HANDLERS: dict[type[events.Event], list] = {
    events.ProductUpdated: [handlers.log_product_update],
    events.CombinationStockUpdated: [handlers.log_combination_stock_update],
    events.LowStockReached: [handlers.send_low_stock_alert],
}

COMMAND_HANDLERS: dict[type[commands.Command], Any] = {
    commands.UpdateProductCommand: handlers.update_product,
    commands.UpdateCombinationStockCommand: handlers.update_combination_stock,
}
