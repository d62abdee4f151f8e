"""
Modèle de domaine du back-office catalogue.

Ce module contient les value objects et les agrégats modifiés par
les commands du back-office :
- Product, avec une ProductShop par boutique associée (multi-boutique)
- Combination (déclinaison), qui porte le stock et ses mouvements
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from backoffice.domain import events

NAME_MAX_LENGTH = 128
LOCATION_MAX_LENGTH = 255


# --- Exceptions ---


class DomainException(Exception):
    """Classe de base pour toutes les erreurs du domaine."""
    pass


class ProductConstraintException(DomainException):
    """Levée quand une valeur de produit est invalide."""
    pass


class CombinationConstraintException(DomainException):
    """Levée quand une valeur de déclinaison est invalide."""
    pass


class ShopConstraintException(DomainException):
    """Levée quand une contrainte de boutique est invalide."""
    pass


class ProductNotFound(DomainException):
    pass


class CombinationNotFound(DomainException):
    pass


class ShopAssociationNotFound(DomainException):
    """Levée quand le produit n'est pas associé à la boutique ciblée."""
    pass


# --- Value Objects ---


def _positive_id(value: Any, error: type[DomainException], label: str) -> None:
    # bool est une sous-classe d'int
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise error(f"{label} invalide : {value!r}")


@dataclass(frozen=True)
class ProductId:
    value: int

    def __post_init__(self) -> None:
        _positive_id(self.value, ProductConstraintException, "Id produit")


@dataclass(frozen=True)
class CombinationId:
    value: int

    def __post_init__(self) -> None:
        _positive_id(self.value, CombinationConstraintException, "Id déclinaison")


@dataclass(frozen=True)
class ShopId:
    value: int

    def __post_init__(self) -> None:
        _positive_id(self.value, ShopConstraintException, "Id boutique")


@dataclass(frozen=True)
class ShopConstraint:
    """
    Portée d'une modification : une boutique précise ou toutes les boutiques.

    On passe par les constructeurs nommés shop() et all_shops()
    plutôt que par le constructeur de la dataclass.
    """

    shop_id: Optional[ShopId] = None

    @classmethod
    def shop(cls, shop_id: int) -> ShopConstraint:
        return cls(shop_id=ShopId(shop_id))

    @classmethod
    def all_shops(cls) -> ShopConstraint:
        return cls(shop_id=None)

    def for_all_shops(self) -> bool:
        return self.shop_id is None


class _FormEnum(str, enum.Enum):
    """Accepte aussi le nom du membre, sans tenir compte de la casse."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class ProductCondition(_FormEnum):
    """État du produit tel qu'affiché sur la fiche produit."""

    NEW = "new"
    USED = "used"
    REFURBISHED = "refurbished"


class ProductVisibility(_FormEnum):
    """
    Endroits de la boutique où le produit est visible.

    La valeur stockée est celle du formulaire ("none") ; le nom
    du membre ("invisible") est accepté aussi.
    """

    VISIBLE_EVERYWHERE = "both"
    VISIBLE_IN_CATALOG = "catalog"
    VISIBLE_IN_SEARCH = "search"
    INVISIBLE = "none"


@dataclass(eq=False)
class StockMovement:
    """
    Mouvement de stock enregistré à chaque changement de quantité.

    delta_quantity est signé : positif pour une entrée, négatif pour une sortie.
    Comparé par identité : deux mouvements de même delta restent distincts.
    """

    delta_quantity: int
    date_add: datetime = field(default_factory=datetime.now)


# --- Entités et agrégats ---


LOCALIZED_FIELDS = (
    "localized_names",
    "localized_descriptions",
    "localized_short_descriptions",
)


class ProductShop:
    """
    Données d'un produit propres à une boutique.

    Ce sont les champs « multi-boutique » : une modification pour
    une seule boutique ne touche que l'instance de cette boutique.
    """

    def __init__(
        self,
        shop_id: int,
        localized_names: Optional[dict[int, str]] = None,
        localized_descriptions: Optional[dict[int, str]] = None,
        localized_short_descriptions: Optional[dict[int, str]] = None,
        condition: ProductCondition = ProductCondition.NEW,
        show_condition: bool = False,
        online_only: bool = False,
        show_price: bool = True,
        available_for_order: bool = True,
        visibility: ProductVisibility = ProductVisibility.VISIBLE_EVERYWHERE,
    ):
        self.shop_id = shop_id
        self.localized_names = localized_names or {}
        self.localized_descriptions = localized_descriptions or {}
        self.localized_short_descriptions = localized_short_descriptions or {}
        self.condition = condition
        self.show_condition = show_condition
        self.online_only = online_only
        self.show_price = show_price
        self.available_for_order = available_for_order
        self.visibility = visibility

    def __repr__(self) -> str:
        return f"<ProductShop {self.shop_id}>"

    def apply(self, changes: dict[str, Any]) -> None:
        """
        Applique les champs modifiés.

        Les champs localisés sont fusionnés langue par langue :
        les langues absentes de la modification gardent leur valeur.
        """
        for name, value in changes.items():
            if name in LOCALIZED_FIELDS:
                value = self._merge_localized(name, value)
            setattr(self, name, value)

    def _merge_localized(self, name: str, values: dict) -> dict[int, str]:
        # Les formulaires JSON transmettent les id de langue en chaînes
        values = {int(lang_id): text for lang_id, text in values.items()}
        if name == "localized_names":
            for lang_id, text in values.items():
                if len(text) > NAME_MAX_LENGTH:
                    raise ProductConstraintException(
                        f"Nom trop long pour la langue {lang_id} "
                        f"(maximum {NAME_MAX_LENGTH} caractères)"
                    )
        return {**getattr(self, name), **values}


class Product:
    """
    Agrégat racine produit.

    manufacturer_id ne dépend pas de la boutique ; les autres champs
    modifiables sont portés par les ProductShop.
    """

    def __init__(
        self,
        id: int,
        shops: Optional[list[ProductShop]] = None,
        manufacturer_id: Optional[int] = None,
    ):
        self.id = id
        self.shops = shops or []
        self.manufacturer_id = manufacturer_id
        self.events: list[events.Event] = []

    def __repr__(self) -> str:
        return f"<Product {self.id}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def shop_ids(self) -> list[int]:
        return sorted(shop.shop_id for shop in self.shops)

    def shop(self, shop_id: int) -> ProductShop:
        try:
            return next(s for s in self.shops if s.shop_id == shop_id)
        except StopIteration:
            raise ShopAssociationNotFound(
                f"Le produit {self.id} n'est pas associé à la boutique {shop_id}"
            ) from None

    def update(self, shop_constraint: ShopConstraint, changes: dict[str, Any]) -> None:
        """
        Applique une modification à la ou aux boutiques ciblées.

        Émet ProductUpdated avec les boutiques touchées et les champs modifiés.
        """
        if not changes:
            return
        if shop_constraint.for_all_shops():
            targets = list(self.shops)
        else:
            targets = [self.shop(shop_constraint.shop_id.value)]

        shop_changes = dict(changes)
        manufacturer_id = shop_changes.pop("manufacturer_id", None)
        if manufacturer_id is not None:
            if manufacturer_id < 0:
                raise ProductConstraintException(
                    f"Id fabricant invalide : {manufacturer_id}"
                )
            self.manufacturer_id = manufacturer_id

        for shop in targets:
            shop.apply(shop_changes)

        self.events.append(
            events.ProductUpdated(
                product_id=self.id,
                shop_ids=tuple(sorted(s.shop_id for s in targets)),
                fields=tuple(sorted(changes)),
            )
        )


class Combination:
    """
    Agrégat déclinaison (combinaison d'attributs d'un produit).

    Porte le stock : chaque changement de quantité peut être tracé
    par un StockMovement.
    """

    def __init__(
        self,
        id: int,
        product_id: int,
        quantity: int = 0,
        minimal_quantity: int = 1,
        location: str = "",
        low_stock_threshold: Optional[int] = None,
        low_stock_alert_on: bool = False,
        available_date: Optional[date] = None,
        movements: Optional[list[StockMovement]] = None,
    ):
        self.id = id
        self.product_id = product_id
        self.quantity = quantity
        self.minimal_quantity = minimal_quantity
        self.location = location
        self.low_stock_threshold = low_stock_threshold
        self.low_stock_alert_on = low_stock_alert_on
        self.available_date = available_date
        self.movements = movements or []
        self.events: list[events.Event] = []

    def __repr__(self) -> str:
        return f"<Combination {self.id}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Combination):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def update_stock(self, changes: dict[str, Any], add_movement: bool = True) -> None:
        """
        Met à jour les informations de stock.

        Un changement de quantité enregistre un mouvement de stock
        (si add_movement) et peut déclencher une alerte de stock bas.
        """
        if not changes:
            return
        minimal_quantity = changes.get("minimal_quantity")
        if minimal_quantity is not None and minimal_quantity < 1:
            raise CombinationConstraintException(
                f"Quantité minimale invalide : {minimal_quantity}"
            )
        location = changes.get("location")
        if location is not None and len(location) > LOCATION_MAX_LENGTH:
            raise CombinationConstraintException(
                f"Emplacement trop long (maximum {LOCATION_MAX_LENGTH} caractères)"
            )

        quantity = changes.get("quantity")
        if quantity is not None:
            delta = quantity - self.quantity
            if add_movement and delta:
                self.movements.append(StockMovement(delta_quantity=delta))

        for name, value in changes.items():
            setattr(self, name, value)

        self.events.append(
            events.CombinationStockUpdated(
                combination_id=self.id,
                fields=tuple(sorted(changes)),
            )
        )
        if quantity is not None and self.is_low_stock():
            self.events.append(
                events.LowStockReached(
                    combination_id=self.id,
                    product_id=self.product_id,
                    quantity=self.quantity,
                    threshold=self.low_stock_threshold,
                )
            )

    def is_low_stock(self) -> bool:
        return (
            self.low_stock_alert_on
            and self.low_stock_threshold is not None
            and self.quantity <= self.low_stock_threshold
        )
