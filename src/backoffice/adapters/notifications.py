"""
Adapter pour les notifications.

Les alertes de stock bas sont rédigées ici (sujet et corps) ;
les implémentations concrètes ne font que les acheminer.
"""

from __future__ import annotations

import abc
import smtplib
from email.message import EmailMessage

from backoffice.domain import events


class AbstractNotifications(abc.ABC):
    """Interface abstraite pour les notifications."""

    def send_low_stock_alert(self, destination: str, event: events.LowStockReached) -> None:
        subject = f"Stock bas : déclinaison {event.combination_id}"
        body = (
            f"La déclinaison {event.combination_id} du produit {event.product_id} "
            f"n'a plus que {event.quantity} unité(s) en stock "
            f"(seuil d'alerte : {event.threshold})."
        )
        self.send(destination, subject, body)

    @abc.abstractmethod
    def send(self, destination: str, subject: str, body: str) -> None:
        raise NotImplementedError


class EmailNotifications(AbstractNotifications):
    """Envoi des notifications par email via SMTP."""

    def __init__(
        self,
        smtp_host: str = "localhost",
        smtp_port: int = 587,
        sender: str = "backoffice@example.com",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.sender = sender

    def send(self, destination: str, subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = destination
        msg["Subject"] = subject
        msg.set_content(body)
        with smtplib.SMTP(self.smtp_host, self.smtp_port) as smtp:
            smtp.send_message(msg)
