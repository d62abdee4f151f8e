"""
Tests unitaires du modèle de domaine.

Ces tests vérifient le comportement des agrégats Product et
Combination en isolation complète, sans base de données ni I/O.
"""

import pytest

from backoffice.domain import events
from backoffice.domain.model import (
    Combination,
    CombinationConstraintException,
    Product,
    ProductCondition,
    ProductConstraintException,
    ProductShop,
    ShopAssociationNotFound,
    ShopConstraint,
)


def make_product() -> Product:
    return Product(
        id=10,
        shops=[
            ProductShop(1, localized_names={1: "Chaise", 2: "Chair"}),
            ProductShop(2, localized_names={1: "Chaise", 2: "Chair"}),
        ],
    )


class TestProductUpdate:
    def test_une_boutique(self):
        product = make_product()

        product.update(ShopConstraint.shop(2), {"show_price": False})

        assert product.shop(1).show_price is True
        assert product.shop(2).show_price is False

    def test_toutes_les_boutiques(self):
        product = make_product()

        product.update(ShopConstraint.all_shops(), {"condition": ProductCondition.USED})

        assert [s.condition for s in product.shops] == [ProductCondition.USED] * 2

    def test_textes_localisés_fusionnés_par_langue(self):
        product = make_product()

        product.update(ShopConstraint.shop(1), {"localized_names": {"2": "Armchair"}})

        assert product.shop(1).localized_names == {1: "Chaise", 2: "Armchair"}
        assert product.shop(2).localized_names == {1: "Chaise", 2: "Chair"}

    def test_nom_trop_long(self):
        product = make_product()

        with pytest.raises(ProductConstraintException, match="trop long"):
            product.update(ShopConstraint.shop(1), {"localized_names": {1: "x" * 129}})

    def test_fabricant_commun_à_toutes_les_boutiques(self):
        product = make_product()

        product.update(ShopConstraint.shop(1), {"manufacturer_id": 4})

        assert product.manufacturer_id == 4

    def test_boutique_non_associée(self):
        product = make_product()

        with pytest.raises(ShopAssociationNotFound):
            product.update(ShopConstraint.shop(3), {"show_price": False})

    def test_émet_product_updated(self):
        product = make_product()

        product.update(ShopConstraint.all_shops(), {"show_price": False, "online_only": True})

        assert product.events == [
            events.ProductUpdated(
                product_id=10, shop_ids=(1, 2), fields=("online_only", "show_price")
            )
        ]

    def test_aucun_changement(self):
        product = make_product()
        product.update(ShopConstraint.all_shops(), {})
        assert product.events == []


class TestCombinationStock:
    def test_changement_de_quantité_trace_un_mouvement(self):
        combination = Combination(id=5, product_id=10, quantity=10)

        combination.update_stock({"quantity": 4})

        assert combination.quantity == 4
        assert [m.delta_quantity for m in combination.movements] == [-6]

    def test_sans_mouvement(self):
        combination = Combination(id=5, product_id=10, quantity=10)

        combination.update_stock({"quantity": 12}, add_movement=False)

        assert combination.quantity == 12
        assert combination.movements == []

    def test_même_quantité_aucun_mouvement(self):
        combination = Combination(id=5, product_id=10, quantity=10)
        combination.update_stock({"quantity": 10})
        assert combination.movements == []

    def test_quantité_minimale_invalide(self):
        combination = Combination(id=5, product_id=10)
        with pytest.raises(CombinationConstraintException):
            combination.update_stock({"minimal_quantity": 0})

    def test_emplacement_trop_long(self):
        combination = Combination(id=5, product_id=10)
        with pytest.raises(CombinationConstraintException):
            combination.update_stock({"location": "x" * 256})

    def test_alerte_de_stock_bas(self):
        combination = Combination(
            id=5, product_id=10, quantity=10,
            low_stock_threshold=3, low_stock_alert_on=True,
        )

        combination.update_stock({"quantity": 3})

        assert combination.events[-1] == events.LowStockReached(
            combination_id=5, product_id=10, quantity=3, threshold=3
        )

    def test_pas_d_alerte_si_désactivée(self):
        combination = Combination(id=5, product_id=10, quantity=10, low_stock_threshold=3)

        combination.update_stock({"quantity": 1})

        assert not any(isinstance(e, events.LowStockReached) for e in combination.events)
