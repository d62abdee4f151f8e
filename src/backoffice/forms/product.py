"""
Builder des commands UpdateProductCommand.

Chaque champ peut être accompagné d'une case « appliquer à toutes
les boutiques » dont la clé est <préfixe><nom du champ>, dans la même
section du formulaire. Selon cette case, la valeur va dans la command
de la boutique courante ou dans la command « toutes boutiques ».
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from backoffice.domain.commands import UpdateProductCommand
from backoffice.domain.model import ProductConstraintException, ShopConstraint
from backoffice.forms.builders import (
    FormField,
    ProductCommandsBuilderInterface,
    to_bool,
)

logger = logging.getLogger(__name__)

VISIBILITY_OPTIONS = ("options", "visibility")

PRODUCT_FIELDS = (
    FormField(("header",), "name", UpdateProductCommand.set_localized_names),
    FormField(("description",), "description", UpdateProductCommand.set_localized_descriptions),
    FormField(("description",), "description_short", UpdateProductCommand.set_localized_short_descriptions),
    FormField(("description",), "manufacturer", UpdateProductCommand.set_manufacturer_id, int),
    FormField(("specifications",), "condition", UpdateProductCommand.set_condition),
    FormField(("specifications",), "show_condition", UpdateProductCommand.set_show_condition, to_bool),
    FormField(VISIBILITY_OPTIONS, "online_only", UpdateProductCommand.set_online_only, to_bool),
    FormField(VISIBILITY_OPTIONS, "show_price", UpdateProductCommand.set_show_price, to_bool),
    FormField(VISIBILITY_OPTIONS, "available_for_order", UpdateProductCommand.set_available_for_order, to_bool),
    FormField(VISIBILITY_OPTIONS, "visibility", UpdateProductCommand.set_visibility),
)


class UpdateProductCommandsBuilder(ProductCommandsBuilderInterface):
    """
    Construit 0, 1 ou 2 UpdateProductCommand.

    Les commands ne sont créées que si au moins un champ les vise ;
    la command de la boutique courante vient toujours en premier.
    """

    def __init__(self, modify_all_shops_prefix: str):
        self.modify_all_shops_prefix = modify_all_shops_prefix

    def build_commands(
        self,
        product_id: int,
        form_data: Mapping,
        single_shop_constraint: ShopConstraint,
    ) -> list[UpdateProductCommand]:
        single_shop_command = None
        all_shops_command = None

        for form_field in PRODUCT_FIELDS:
            value = form_field.value(form_data, ProductConstraintException)
            if value is None:
                continue

            # Si la boutique courante est déjà « toutes les boutiques »,
            # une seule command suffit
            if (
                self._modifies_all_shops(form_data, form_field)
                and not single_shop_constraint.for_all_shops()
            ):
                if all_shops_command is None:
                    all_shops_command = UpdateProductCommand(
                        product_id, ShopConstraint.all_shops()
                    )
                command = all_shops_command
            else:
                if single_shop_command is None:
                    single_shop_command = UpdateProductCommand(
                        product_id, single_shop_constraint
                    )
                command = single_shop_command

            form_field.setter(command, value)

        built = [c for c in (single_shop_command, all_shops_command) if c is not None]
        logger.debug("Produit %s : %d command(s) construite(s)", product_id, len(built))
        return built

    def _modifies_all_shops(self, form_data: Mapping, form_field: FormField) -> bool:
        section = form_field.section(form_data)
        flag = section.get(self.modify_all_shops_prefix + form_field.name)
        return flag is not None and to_bool(flag)
