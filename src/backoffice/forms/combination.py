"""Builder de la command de stock d'une déclinaison."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from backoffice.domain.commands import UpdateCombinationStockCommand
from backoffice.domain.model import CombinationConstraintException
from backoffice.forms.builders import FormField, to_bool, to_date

COMBINATION_STOCK_FIELDS = (
    FormField(("stock", "quantities"), "quantity", UpdateCombinationStockCommand.set_quantity, int),
    FormField(("stock", "quantities"), "minimal_quantity", UpdateCombinationStockCommand.set_minimal_quantity, int),
    FormField(("stock", "options"), "stock_location", UpdateCombinationStockCommand.set_location, str),
    FormField(("stock", "options"), "low_stock_threshold", UpdateCombinationStockCommand.set_low_stock_threshold, int),
    FormField(("stock", "options"), "low_stock_alert", UpdateCombinationStockCommand.set_low_stock_alert_on, to_bool),
    FormField(("stock",), "available_date", UpdateCombinationStockCommand.set_available_date, to_date),
)


class CombinationStockCommandsBuilder:
    """Le stock d'une déclinaison n'est pas multi-boutique : 0 ou 1 command."""

    def build_commands(
        self, combination_id: int, form_data: Mapping
    ) -> list[UpdateCombinationStockCommand]:
        command: Optional[UpdateCombinationStockCommand] = None
        for form_field in COMBINATION_STOCK_FIELDS:
            value = form_field.value(form_data, CombinationConstraintException)
            if value is None:
                continue
            if command is None:
                command = UpdateCombinationStockCommand(combination_id)
            form_field.setter(command, value)
        return [command] if command is not None else []
