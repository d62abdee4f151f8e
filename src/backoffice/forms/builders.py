"""
Construction de commands à partir des données de formulaire.

Un builder reçoit les données brutes soumises par un formulaire
(dictionnaire imbriqué non typé) et en déduit les commands à envoyer
au message bus. Il ne lève pas d'erreur sur les données inconnues :
une clé non reconnue est simplement ignorée.

Chaque champ reconnu est décrit par un FormField : son chemin dans
le formulaire, sa clé, le setter de la command qu'il alimente et
la conversion à appliquer à la valeur soumise.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Optional

from backoffice.domain import commands
from backoffice.domain.model import DomainException, ShopConstraint

FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})


def to_bool(value: Any) -> bool:
    """Interprète une valeur de formulaire comme un booléen ("0" est faux)."""
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


def to_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def verbatim(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class FormField:
    """Un champ de formulaire reconnu et la façon de l'appliquer à une command."""

    path: tuple[str, ...]
    name: str
    setter: Callable[[Any, Any], Any]
    convert: Callable[[Any], Any] = verbatim

    def section(self, form_data: Mapping) -> Optional[Mapping]:
        """Descend dans le formulaire ; None si une section manque."""
        section: Any = form_data
        for key in self.path:
            if not isinstance(section, Mapping):
                return None
            section = section.get(key)
        return section if isinstance(section, Mapping) else None

    def value(self, form_data: Mapping, error: type[DomainException]) -> Any:
        """
        Valeur convertie du champ, ou None s'il est absent.

        Une valeur qui ne peut pas être convertie lève `error`.
        """
        section = self.section(form_data)
        if section is None or section.get(self.name) is None:
            return None
        raw = section[self.name]
        try:
            return self.convert(raw)
        except (TypeError, ValueError):
            raise error(f"Valeur invalide pour le champ {self.name} : {raw!r}") from None


class ProductCommandsBuilderInterface(abc.ABC):
    """Interface des builders produisant des commands produit multi-boutique."""

    @abc.abstractmethod
    def build_commands(
        self,
        product_id: int,
        form_data: Mapping,
        single_shop_constraint: ShopConstraint,
    ) -> list[commands.Command]:
        raise NotImplementedError


class ProductCommandsBuilder(ProductCommandsBuilderInterface):
    """
    Enchaîne plusieurs builders produit.

    Les commands sont retournées dans l'ordre des builders, puis
    dans l'ordre propre à chaque builder.
    """

    def __init__(self, builders: Iterable[ProductCommandsBuilderInterface]):
        self.builders = list(builders)

    def build_commands(
        self,
        product_id: int,
        form_data: Mapping,
        single_shop_constraint: ShopConstraint,
    ) -> list[commands.Command]:
        built: list[commands.Command] = []
        for builder in self.builders:
            built.extend(
                builder.build_commands(product_id, form_data, single_shop_constraint)
            )
        return built
