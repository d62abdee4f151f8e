"""
Pattern Repository.

Le repository fournit une abstraction sur la couche de persistance.
Il expose une interface de type collection (add, get) qui masque
les détails de l'accès aux données.

Un repository par agrégat : produits et déclinaisons.
"""

from __future__ import annotations

import abc
from typing import Union

from sqlalchemy.orm import Session

from backoffice.domain import model

Aggregate = Union[model.Product, model.Combination]


class AbstractRepository(abc.ABC):
    """
    Interface abstraite du repository.

    Le pattern Template Method est utilisé : les méthodes publiques
    (add, get) gèrent le tracking via `seen`, puis délèguent
    aux méthodes abstraites préfixées _ que les sous-classes implémentent.
    """

    seen: set[Aggregate]

    def __init__(self) -> None:
        # `seen` trace tous les agrégats consultés pendant la transaction,
        # ce qui permet au Unit of Work de collecter leurs événements.
        self.seen: set[Aggregate] = set()

    def add(self, aggregate: Aggregate) -> None:
        """Ajoute un agrégat au repository et le marque comme vu."""
        self._add(aggregate)
        self.seen.add(aggregate)

    def get(self, id: int) -> Aggregate | None:
        """Récupère un agrégat par son id et le marque comme vu."""
        aggregate = self._get(id)
        if aggregate:
            self.seen.add(aggregate)
        return aggregate

    @abc.abstractmethod
    def _add(self, aggregate: Aggregate) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, id: int) -> Aggregate | None:
        raise NotImplementedError


class SqlAlchemyRepository(AbstractRepository):
    """Implémentation concrète du repository avec SQLAlchemy."""

    def __init__(self, session: Session, aggregate_type: type[Aggregate]):
        super().__init__()
        self.session = session
        self.aggregate_type = aggregate_type

    def _add(self, aggregate: Aggregate) -> None:
        self.session.add(aggregate)

    def _get(self, id: int) -> Aggregate | None:
        return self.session.get(self.aggregate_type, id)
