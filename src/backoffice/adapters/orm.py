"""
Mapping ORM avec SQLAlchemy (classical mapping).

On définit les tables séparément, puis on mappe les classes
du domaine sur ces tables. Cela permet au modèle de domaine
de rester ignorant de la persistance (persistence ignorance).
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    event,
    inspect,
)
from sqlalchemy.orm import registry, relationship
from sqlalchemy.types import TypeDecorator

from backoffice.domain import model

metadata = MetaData()
mapper_registry = registry(metadata=metadata)


class LocalizedText(TypeDecorator):
    """
    Texte localisé stocké en JSON.

    Les clés JSON sont forcément des chaînes : on restaure les
    id de langue entiers au chargement.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return {str(lang_id): text for lang_id, text in value.items()}

    def process_result_value(self, value, dialect):
        if value is None:
            return {}
        return {int(lang_id): text for lang_id, text in value.items()}


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# --- Définition des tables ---

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("manufacturer_id", Integer, nullable=True),
)

product_shops = Table(
    "product_shops",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("shop_id", Integer, nullable=False),
    Column("localized_names", LocalizedText),
    Column("localized_descriptions", LocalizedText),
    Column("localized_short_descriptions", LocalizedText),
    Column("condition", Enum(model.ProductCondition, values_callable=_enum_values)),
    Column("show_condition", Boolean),
    Column("online_only", Boolean),
    Column("show_price", Boolean),
    Column("available_for_order", Boolean),
    Column("visibility", Enum(model.ProductVisibility, values_callable=_enum_values)),
)

combinations = Table(
    "combinations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False, server_default="0"),
    Column("minimal_quantity", Integer, nullable=False, server_default="1"),
    Column("location", String(255), nullable=False, server_default=""),
    Column("low_stock_threshold", Integer, nullable=True),
    Column("low_stock_alert", Boolean, nullable=False, server_default="0"),
    Column("available_date", Date, nullable=True),
)

stock_movements = Table(
    "stock_movements",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("combination_id", Integer, ForeignKey("combinations.id"), nullable=False),
    Column("delta_quantity", Integer, nullable=False),
    Column("date_add", DateTime, nullable=False),
)


def start_mappers() -> None:
    """
    Configure le mapping entre les classes du domaine et les tables SQL.

    Peut être appelée plusieurs fois : le mapping n'est fait qu'une fois.
    """
    if inspect(model.Product, raiseerr=False) is not None:
        return

    shops_mapper = mapper_registry.map_imperatively(model.ProductShop, product_shops)
    mapper_registry.map_imperatively(
        model.Product,
        products,
        properties={
            "shops": relationship(
                shops_mapper,
                order_by=product_shops.c.shop_id,
                cascade="all, delete-orphan",
            ),
        },
    )
    movements_mapper = mapper_registry.map_imperatively(
        model.StockMovement,
        stock_movements,
    )
    mapper_registry.map_imperatively(
        model.Combination,
        combinations,
        properties={
            "low_stock_alert_on": combinations.c.low_stock_alert,
            "movements": relationship(
                movements_mapper,
                order_by=stock_movements.c.id,
                cascade="all, delete-orphan",
            ),
        },
    )

    event.listen(model.Product, "load", receive_load)
    event.listen(model.Combination, "load", receive_load)


def receive_load(aggregate, _) -> None:
    """Initialise la liste d'événements quand un agrégat est chargé depuis la BDD."""
    aggregate.events = []
