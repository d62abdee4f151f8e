"""
Views (lecture) pour le pattern CQRS.

Les views interrogent directement les tables, sans charger
d'agrégat ni passer par le message bus.
"""

from __future__ import annotations

from sqlalchemy import select

from backoffice.adapters import orm
from backoffice.service_layer import unit_of_work


def product_in_shop(
    product_id: int, shop_id: int, uow: unit_of_work.AbstractUnitOfWork
) -> dict | None:
    """Données d'un produit dans une boutique, ou None si non associé."""
    query = (
        select(
            orm.products.c.manufacturer_id,
            orm.product_shops.c.localized_names,
            orm.product_shops.c.localized_descriptions,
            orm.product_shops.c.localized_short_descriptions,
            orm.product_shops.c.condition,
            orm.product_shops.c.show_condition,
            orm.product_shops.c.online_only,
            orm.product_shops.c.show_price,
            orm.product_shops.c.available_for_order,
            orm.product_shops.c.visibility,
        )
        .select_from(
            orm.product_shops.join(
                orm.products, orm.products.c.id == orm.product_shops.c.product_id
            )
        )
        .where(
            orm.product_shops.c.product_id == product_id,
            orm.product_shops.c.shop_id == shop_id,
        )
    )
    with uow:
        row = uow.session.execute(query).first()
    if row is None:
        return None
    data = dict(row._mapping)
    data["condition"] = data["condition"].value
    data["visibility"] = data["visibility"].value
    return {"product_id": product_id, "shop_id": shop_id, **data}


def combination_stock(
    combination_id: int, uow: unit_of_work.AbstractUnitOfWork
) -> dict | None:
    query = select(
        orm.combinations.c.product_id,
        orm.combinations.c.quantity,
        orm.combinations.c.minimal_quantity,
        orm.combinations.c.location,
        orm.combinations.c.low_stock_threshold,
        orm.combinations.c.low_stock_alert,
        orm.combinations.c.available_date,
    ).where(orm.combinations.c.id == combination_id)
    with uow:
        row = uow.session.execute(query).first()
    if row is None:
        return None
    data = dict(row._mapping)
    if data["available_date"] is not None:
        data["available_date"] = data["available_date"].isoformat()
    return {"combination_id": combination_id, **data}
