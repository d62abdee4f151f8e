"""
Message Bus.

Point central de dispatch des commands produites par les builders de
formulaire, et des events émis par les agrégats pendant leur traitement.

- Une command a exactement UN handler ; l'erreur remonte à l'appelant
- Un event peut avoir 0 à N handlers ; les erreurs sont loggées mais ne bloquent pas
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterable, Union

from backoffice.domain import commands, events
from backoffice.service_layer import unit_of_work

logger = logging.getLogger(__name__)

Message = Union[commands.Command, events.Event]


class MessageBus:
    """
    Message Bus avec injection de dépendances.

    Les dépendances (uow, notifications, paramètres...) sont injectées
    à la construction et transmises aux handlers d'après le nom
    de leurs paramètres.
    """

    def __init__(
        self,
        uow: unit_of_work.AbstractUnitOfWork,
        event_handlers: dict[type[events.Event], list[Callable]],
        command_handlers: dict[type[commands.Command], Callable],
        dependencies: dict[str, Any] | None = None,
    ):
        self.uow = uow
        self.event_handlers = event_handlers
        self.command_handlers = command_handlers
        self.dependencies = {"uow": uow, **(dependencies or {})}
        self.queue: list[Message] = []

    def handle(self, message: Message) -> list[Any]:
        """
        Traite un message puis, en cascade, les events qui en découlent.

        Retourne les résultats des command handlers.
        """
        self.queue = [message]
        results: list[Any] = []
        while self.queue:
            message = self.queue.pop(0)
            if isinstance(message, events.Event):
                self._handle_event(message)
            elif isinstance(message, commands.Command):
                results.append(self._handle_command(message))
            else:
                raise ValueError(f"Message de type inconnu : {type(message)}")
        return results

    def handle_all(self, messages: Iterable[commands.Command]) -> list[Any]:
        """
        Traite les commands d'un builder dans l'ordre reçu, en une transaction.

        La command de la boutique courante passe avant la command
        « toutes boutiques ». Les commits des handlers sont reportés
        à la fin : si une command échoue, aucune n'est enregistrée.
        """
        results: list[Any] = []
        with self.uow:
            for message in messages:
                results.extend(self.handle(message))
            self.uow.commit()
        return results

    def _handle_event(self, event: events.Event) -> None:
        for handler in self.event_handlers.get(type(event), []):
            try:
                logger.debug("Traitement de l'event %s avec %s", event, handler.__name__)
                self._call_handler(handler, event)
                self.queue.extend(self.uow.collect_new_events())
            except Exception:
                logger.exception("Erreur lors du traitement de l'event %s", event)

    def _handle_command(self, command: commands.Command) -> Any:
        logger.debug("Traitement de la command %s", command)
        handler = self.command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"Aucun handler pour la command {type(command)}")
        result = self._call_handler(handler, command)
        self.queue.extend(self.uow.collect_new_events())
        return result

    def _call_handler(self, handler: Callable, message: Message) -> Any:
        # Le premier paramètre est le message, les suivants sont résolus par nom
        names = list(inspect.signature(handler).parameters)[1:]
        kwargs = {name: self.dependencies[name] for name in names if name in self.dependencies}
        return handler(message, **kwargs)
