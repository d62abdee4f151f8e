"""
Pattern Unit of Work.

Le Unit of Work (UoW) gère la notion de transaction atomique.
Il coordonne l'écriture en base de données et la collecte
des événements émis par les agrégats au cours de la transaction.

Le UoW agit comme un context manager :
    with uow:
        # ... opérations sur les repositories ...
        uow.commit()
"""

from __future__ import annotations

import abc

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from backoffice.adapters import repository
from backoffice.config import get_settings
from backoffice.domain import model

DEFAULT_SESSION_FACTORY = sessionmaker(
    bind=create_engine(get_settings().database_uri)
)


class AbstractUnitOfWork(abc.ABC):
    """
    Interface abstraite du Unit of Work.

    Fournit les repositories `products` et `combinations` et gère
    commit/rollback. Le rollback est automatique si commit() n'est
    pas appelé (grâce au __exit__ du context manager).

    Les `with uow` peuvent s'imbriquer : seul le niveau le plus externe
    commite ou annule réellement. Plusieurs commands traitées dans un
    même `with uow` forment donc une seule transaction.
    """

    products: repository.AbstractRepository
    combinations: repository.AbstractRepository

    _depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def __enter__(self) -> AbstractUnitOfWork:
        self._depth += 1
        return self

    def __exit__(self, *args: object) -> None:
        self._depth -= 1
        if self._depth == 0:
            self.rollback()

    def commit(self) -> None:
        # Un commit imbriqué est reporté au niveau externe
        if self._depth <= 1:
            self._commit()

    def collect_new_events(self):
        """
        Collecte tous les événements émis par les agrégats vus
        pendant cette transaction, tous repositories confondus.
        """
        for repo in (self.products, self.combinations):
            for aggregate in repo.seen:
                while aggregate.events:
                    yield aggregate.events.pop(0)

    @abc.abstractmethod
    def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    Implémentation concrète du UoW avec SQLAlchemy.

    Crée une session à l'entrée du context manager,
    la ferme à la sortie. Rollback automatique si pas de commit.
    """

    def __init__(self, session_factory: sessionmaker = DEFAULT_SESSION_FACTORY):
        self.session_factory = session_factory

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if not self.in_transaction:
            self.session: Session = self.session_factory()
            self.products = repository.SqlAlchemyRepository(self.session, model.Product)
            self.combinations = repository.SqlAlchemyRepository(self.session, model.Combination)
        return super().__enter__()

    def __exit__(self, *args: object) -> None:
        super().__exit__(*args)
        if not self.in_transaction:
            self.session.close()

    def _commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
