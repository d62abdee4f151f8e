"""
Point d'entrée Flask.

L'API Flask est un thin adapter : elle reçoit les données de formulaire
déjà soumises, les convertit en commands via les builders, les envoie
au message bus et convertit les résultats en réponses HTTP.

L'API ne contient aucune logique métier.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from backoffice.config import get_settings
from backoffice.domain import model
from backoffice.forms.builders import ProductCommandsBuilder
from backoffice.forms.combination import CombinationStockCommandsBuilder
from backoffice.forms.product import UpdateProductCommandsBuilder
from backoffice.service_layer import bootstrap

settings = get_settings()
logging.basicConfig(level=settings.log_level)

app = Flask(__name__)
bus = bootstrap.bootstrap(settings=settings)

product_builder = ProductCommandsBuilder([
    UpdateProductCommandsBuilder(settings.modify_all_shops_prefix),
])
combination_builder = CombinationStockCommandsBuilder()


@app.errorhandler(model.ProductNotFound)
@app.errorhandler(model.CombinationNotFound)
def not_found(e: model.DomainException):
    return jsonify({"message": str(e)}), 404


@app.errorhandler(model.DomainException)
def bad_request(e: model.DomainException):
    return jsonify({"message": str(e)}), 400


@app.route("/products/<int:product_id>", methods=["PATCH"])
def update_product_endpoint(product_id: int):
    """
    PATCH /products/<product_id>?shop_id=<shop_id>
    Body JSON : données du formulaire produit

    Sans shop_id, la modification vise toutes les boutiques.
    """
    shop_id = request.args.get("shop_id", type=int)
    if shop_id is None:
        shop_constraint = model.ShopConstraint.all_shops()
    else:
        shop_constraint = model.ShopConstraint.shop(shop_id)

    cmds = product_builder.build_commands(product_id, request.get_json() or {}, shop_constraint)
    bus.handle_all(cmds)
    return jsonify({"commands": len(cmds)}), 200


@app.route("/combinations/<int:combination_id>/stock", methods=["PATCH"])
def update_combination_stock_endpoint(combination_id: int):
    """
    PATCH /combinations/<combination_id>/stock
    Body JSON : données du formulaire de stock de la déclinaison
    """
    cmds = combination_builder.build_commands(combination_id, request.get_json() or {})
    bus.handle_all(cmds)
    return jsonify({"commands": len(cmds)}), 200


@app.route("/products/<int:product_id>/shops/<int:shop_id>", methods=["GET"])
def product_view_endpoint(product_id: int, shop_id: int):
    from backoffice.views import views

    result = views.product_in_shop(product_id, shop_id, bus.uow)
    if result is None:
        return "not found", 404
    return jsonify(result), 200


@app.route("/combinations/<int:combination_id>/stock", methods=["GET"])
def combination_stock_view_endpoint(combination_id: int):
    from backoffice.views import views

    result = views.combination_stock(combination_id, bus.uow)
    if result is None:
        return "not found", 404
    return jsonify(result), 200
