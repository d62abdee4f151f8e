"""
Events du domaine.

Les events représentent des faits qui se sont produits dans le système.
Ils sont immuables et nommés au passé (quelque chose s'est passé).
"""

from dataclasses import dataclass
from typing import Optional


class Event:
    """Classe de base pour tous les events du domaine."""
    pass


@dataclass(frozen=True)
class ProductUpdated(Event):
    """Un produit a été modifié dans une ou plusieurs boutiques."""

    product_id: int
    shop_ids: tuple[int, ...]
    fields: tuple[str, ...]


@dataclass(frozen=True)
class CombinationStockUpdated(Event):
    """Les informations de stock d'une déclinaison ont été modifiées."""

    combination_id: int
    fields: tuple[str, ...]


@dataclass(frozen=True)
class LowStockReached(Event):
    """La quantité d'une déclinaison est passée sous le seuil d'alerte."""

    combination_id: int
    product_id: int
    quantity: int
    threshold: Optional[int]
