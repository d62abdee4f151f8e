"""
Handlers pour les commands et events.

Les handlers sont les fonctions qui traitent les commands et events
transitant par le message bus.

- Command handlers : appliquent une modification à un agrégat (peuvent échouer)
- Event handlers : réagissent à un fait passé (ne doivent pas échouer)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from backoffice.domain import commands, events, model

if TYPE_CHECKING:
    from backoffice.adapters.notifications import AbstractNotifications
    from backoffice.config import Settings
    from backoffice.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


# --- Command Handlers ---


def update_product(
    cmd: commands.UpdateProductCommand,
    uow: AbstractUnitOfWork,
) -> None:
    """
    Applique les champs renseignés de la command au produit.

    Seules les boutiques visées par la contrainte de boutique sont modifiées.
    """
    with uow:
        product = uow.products.get(cmd.product_id.value)
        if product is None:
            raise model.ProductNotFound(f"Produit inconnu : {cmd.product_id.value}")
        product.update(cmd.shop_constraint, cmd.updated_fields())
        uow.commit()


def update_combination_stock(
    cmd: commands.UpdateCombinationStockCommand,
    uow: AbstractUnitOfWork,
) -> None:
    with uow:
        combination = uow.combinations.get(cmd.combination_id.value)
        if combination is None:
            raise model.CombinationNotFound(
                f"Déclinaison inconnue : {cmd.combination_id.value}"
            )
        combination.update_stock(cmd.updated_fields(), add_movement=cmd.movement_on)
        uow.commit()


# --- Event Handlers ---


def log_product_update(event: events.ProductUpdated) -> None:
    logger.info(
        "Produit %s modifié (boutiques %s) : %s",
        event.product_id, list(event.shop_ids), ", ".join(event.fields),
    )


def log_combination_stock_update(event: events.CombinationStockUpdated) -> None:
    logger.info(
        "Stock de la déclinaison %s modifié : %s",
        event.combination_id, ", ".join(event.fields),
    )


def send_low_stock_alert(
    event: events.LowStockReached,
    notifications: AbstractNotifications,
    settings: Settings,
) -> None:
    """Envoie une alerte quand le stock d'une déclinaison passe sous le seuil."""
    notifications.send_low_stock_alert(settings.low_stock_alert_email, event)
