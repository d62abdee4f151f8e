"""
Tests end-to-end de l'API Flask.

Ces tests vérifient le flux complet :
HTTP request → Flask → builder → Message Bus → Handlers → Repository → SQLite

On utilise le test client Flask avec une base SQLite en mémoire,
ce qui donne des tests rapides tout en couvrant toute la chaîne.
"""

import pytest

from backoffice.adapters import notifications
from backoffice.domain.model import Combination, Product, ProductShop
from backoffice.entrypoints.flask_app import app
from backoffice.service_layer import bootstrap, unit_of_work

PREFIX = "modify_all_shops_"


class FakeNotifications(notifications.AbstractNotifications):
    def __init__(self):
        self.sent = []

    def send(self, destination: str, subject: str, body: str) -> None:
        self.sent.append({"destination": destination, "subject": subject, "body": body})


@pytest.fixture
def sqlite_bus(session_factory):
    """Crée un message bus configuré avec SQLite en mémoire et un catalogue minimal."""
    session = session_factory()
    session.add(Product(id=1, shops=[
        ProductShop(1, localized_names={1: "Horloge", 2: "Clock"}),
        ProductShop(2, localized_names={1: "Horloge", 2: "Clock"}),
    ]))
    session.add(Combination(id=7, product_id=1, quantity=10, low_stock_threshold=2, low_stock_alert_on=True))
    session.commit()
    session.close()

    return bootstrap.bootstrap(
        start_orm=False,
        uow=unit_of_work.SqlAlchemyUnitOfWork(session_factory=session_factory),
        notifications_adapter=FakeNotifications(),
    )


@pytest.fixture
def client(sqlite_bus):
    """Client de test Flask avec le bus injecté."""
    import backoffice.entrypoints.flask_app as flask_module

    original_bus = flask_module.bus
    flask_module.bus = sqlite_bus
    app.config["TESTING"] = True

    with app.test_client() as client:
        yield client

    flask_module.bus = original_bus


class TestUpdateProduct:
    def test_une_boutique(self, client):
        response = client.patch("/products/1?shop_id=2", json={
            "header": {"name": {"1": "Pendule"}},
            "specifications": {"condition": "used", "show_condition": "1"},
        })

        assert response.status_code == 200
        assert response.get_json() == {"commands": 1}

        shop_2 = client.get("/products/1/shops/2").get_json()
        assert shop_2["localized_names"] == {"1": "Pendule", "2": "Clock"}
        assert shop_2["condition"] == "used"
        assert shop_2["show_condition"] is True
        shop_1 = client.get("/products/1/shops/1").get_json()
        assert shop_1["localized_names"] == {"1": "Horloge", "2": "Clock"}
        assert shop_1["condition"] == "new"

    def test_deux_portées(self, client):
        response = client.patch("/products/1?shop_id=1", json={
            "description": {"manufacturer": "3"},
            "options": {
                "visibility": {
                    "visibility": "catalog",
                    "show_price": False,
                    PREFIX + "show_price": True,
                },
            },
        })

        assert response.get_json() == {"commands": 2}
        shop_1 = client.get("/products/1/shops/1").get_json()
        shop_2 = client.get("/products/1/shops/2").get_json()
        assert shop_1["visibility"] == "catalog"
        assert shop_2["visibility"] == "both"
        assert shop_1["show_price"] is False
        assert shop_2["show_price"] is False
        assert shop_2["manufacturer_id"] == 3

    def test_sans_boutique_vise_toutes_les_boutiques(self, client):
        client.patch("/products/1", json={"options": {"visibility": {"online_only": True}}})

        assert client.get("/products/1/shops/1").get_json()["online_only"] is True
        assert client.get("/products/1/shops/2").get_json()["online_only"] is True

    def test_formulaire_sans_champ_reconnu(self, client):
        response = client.patch("/products/1?shop_id=1", json={"seo": {"slug": "horloge"}})
        assert response.get_json() == {"commands": 0}

    def test_produit_inconnu_retourne_404(self, client):
        response = client.patch("/products/99?shop_id=1", json={"header": {"name": {"1": "X"}}})
        assert response.status_code == 404
        assert "Produit inconnu" in response.get_json()["message"]

    def test_boutique_non_associée_retourne_400(self, client):
        response = client.patch("/products/1?shop_id=5", json={"header": {"name": {"1": "X"}}})
        assert response.status_code == 400

    def test_état_invalide_retourne_400(self, client):
        response = client.patch("/products/1?shop_id=1", json={"specifications": {"condition": "cassé"}})
        assert response.status_code == 400

    def test_erreur_sur_toutes_les_boutiques_annule_la_boutique_courante(self, client):
        response = client.patch("/products/1?shop_id=1", json={
            "header": {"name": {"1": "X" * 200}, PREFIX + "name": True},
            "specifications": {"condition": "used"},
        })

        assert response.status_code == 400
        assert "trop long" in response.get_json()["message"]
        shop_1 = client.get("/products/1/shops/1").get_json()
        assert shop_1["condition"] == "new"
        assert shop_1["localized_names"] == {"1": "Horloge", "2": "Clock"}

    def test_fabricant_non_numérique_retourne_400(self, client):
        response = client.patch("/products/1?shop_id=1", json={"description": {"manufacturer": "abc"}})
        assert response.status_code == 400
        assert "manufacturer" in response.get_json()["message"]

    def test_erreur_interne_non_convertie_en_400(self, client, sqlite_bus, monkeypatch):
        def handle_all(messages):
            raise ValueError("Aucun handler")

        monkeypatch.setattr(sqlite_bus, "handle_all", handle_all)

        # TESTING propage les exceptions non gérées au lieu d'une 500
        with pytest.raises(ValueError, match="Aucun handler"):
            client.patch("/products/1?shop_id=1", json={"specifications": {"condition": "used"}})

    def test_vue_boutique_inexistante_retourne_404(self, client):
        assert client.get("/products/1/shops/9").status_code == 404


class TestUpdateCombinationStock:
    def test_met_à_jour_le_stock(self, client, sqlite_bus):
        response = client.patch("/combinations/7/stock", json={
            "stock": {
                "quantities": {"quantity": 1},
                "options": {"stock_location": "C-1"},
                "available_date": "2026-11-30",
            },
        })

        assert response.status_code == 200
        stock = client.get("/combinations/7/stock").get_json()
        assert stock["quantity"] == 1
        assert stock["location"] == "C-1"
        assert stock["available_date"] == "2026-11-30"
        assert len(sqlite_bus.dependencies["notifications"].sent) == 1

    def test_déclinaison_inconnue_retourne_404(self, client):
        response = client.patch("/combinations/8/stock", json={"stock": {"quantities": {"quantity": 1}}})
        assert response.status_code == 404

    def test_date_invalide_retourne_400(self, client):
        response = client.patch("/combinations/7/stock", json={"stock": {"available_date": "demain"}})
        assert response.status_code == 400

    def test_vue_inexistante_retourne_404(self, client):
        assert client.get("/combinations/8/stock").status_code == 404
