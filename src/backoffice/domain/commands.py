"""
Commands du domaine.

Les commands représentent des intentions : quelque chose que
le système doit faire. Contrairement aux events (faits passés),
les commands sont des demandes qui peuvent échouer.

Les commands de mise à jour ne portent que les champs à modifier :
un champ resté à None signifie « ne pas changer ». Les champs
sont renseignés par des setters chaînables (set_xxx) qui retournent
la command elle-même.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Optional, Union

from backoffice.domain.model import (
    CombinationId,
    ProductCondition,
    ProductConstraintException,
    ProductId,
    ProductVisibility,
    ShopConstraint,
)


class Command:
    """Classe de base pour toutes les commands."""

    _identity_fields: tuple[str, ...] = ()

    def updated_fields(self) -> dict[str, Any]:
        """Retourne les champs renseignés, hors identifiants."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in self._identity_fields
            and getattr(self, f.name) is not None
        }


def _unset() -> Any:
    return field(default=None, init=False)


@dataclass
class UpdateCombinationStockCommand(Command):
    """Met à jour les informations de stock d'une déclinaison."""

    combination_id: CombinationId
    quantity: Optional[int] = _unset()
    minimal_quantity: Optional[int] = _unset()
    location: Optional[str] = _unset()
    low_stock_threshold: Optional[int] = _unset()
    low_stock_alert_on: Optional[bool] = _unset()
    available_date: Optional[date] = _unset()
    # Pas de setter : un changement de quantité trace toujours un mouvement
    movement_on: bool = field(default=True, init=False, compare=False)

    _identity_fields = ("combination_id", "movement_on")

    def __post_init__(self) -> None:
        if not isinstance(self.combination_id, CombinationId):
            self.combination_id = CombinationId(self.combination_id)

    def set_quantity(self, quantity: int) -> UpdateCombinationStockCommand:
        self.quantity = quantity
        return self

    def set_minimal_quantity(self, minimal_quantity: int) -> UpdateCombinationStockCommand:
        self.minimal_quantity = minimal_quantity
        return self

    def set_location(self, location: str) -> UpdateCombinationStockCommand:
        # TODO: valider le format de l'emplacement (caractères autorisés)
        self.location = location
        return self

    def set_low_stock_threshold(self, low_stock_threshold: int) -> UpdateCombinationStockCommand:
        self.low_stock_threshold = low_stock_threshold
        return self

    def set_low_stock_alert_on(self, low_stock_alert_on: bool) -> UpdateCombinationStockCommand:
        self.low_stock_alert_on = low_stock_alert_on
        return self

    def set_available_date(self, available_date: date) -> UpdateCombinationStockCommand:
        self.available_date = available_date
        return self


@dataclass
class UpdateProductCommand(Command):
    """
    Met à jour les données d'un produit.

    shop_constraint indique si la modification vise une seule
    boutique ou toutes les boutiques associées au produit.
    """

    product_id: ProductId
    shop_constraint: ShopConstraint
    localized_names: Optional[dict[int, str]] = _unset()
    localized_descriptions: Optional[dict[int, str]] = _unset()
    localized_short_descriptions: Optional[dict[int, str]] = _unset()
    manufacturer_id: Optional[int] = _unset()
    condition: Optional[ProductCondition] = _unset()
    show_condition: Optional[bool] = _unset()
    online_only: Optional[bool] = _unset()
    show_price: Optional[bool] = _unset()
    available_for_order: Optional[bool] = _unset()
    visibility: Optional[ProductVisibility] = _unset()

    _identity_fields = ("product_id", "shop_constraint")

    def __post_init__(self) -> None:
        if not isinstance(self.product_id, ProductId):
            self.product_id = ProductId(self.product_id)

    def set_localized_names(self, localized_names: dict[int, str]) -> UpdateProductCommand:
        self.localized_names = localized_names
        return self

    def set_localized_descriptions(self, localized_descriptions: dict[int, str]) -> UpdateProductCommand:
        self.localized_descriptions = localized_descriptions
        return self

    def set_localized_short_descriptions(
        self, localized_short_descriptions: dict[int, str]
    ) -> UpdateProductCommand:
        self.localized_short_descriptions = localized_short_descriptions
        return self

    def set_manufacturer_id(self, manufacturer_id: int) -> UpdateProductCommand:
        self.manufacturer_id = manufacturer_id
        return self

    def set_condition(self, condition: Union[str, ProductCondition]) -> UpdateProductCommand:
        try:
            self.condition = ProductCondition(condition)
        except ValueError:
            raise ProductConstraintException(f"État de produit invalide : {condition!r}") from None
        return self

    def set_show_condition(self, show_condition: bool) -> UpdateProductCommand:
        self.show_condition = show_condition
        return self

    def set_online_only(self, online_only: bool) -> UpdateProductCommand:
        self.online_only = online_only
        return self

    def set_show_price(self, show_price: bool) -> UpdateProductCommand:
        self.show_price = show_price
        return self

    def set_available_for_order(self, available_for_order: bool) -> UpdateProductCommand:
        self.available_for_order = available_for_order
        return self

    def set_visibility(self, visibility: Union[str, ProductVisibility]) -> UpdateProductCommand:
        try:
            self.visibility = ProductVisibility(visibility)
        except ValueError:
            raise ProductConstraintException(f"Visibilité invalide : {visibility!r}") from None
        return self
