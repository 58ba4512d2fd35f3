"""
Boundary normalization.

The wizard has two shapes for the same thing: the current list of
selectedProducts, and the older flat single-product fields. Everything past
this module sees only a list of ProductSelection.
"""

import logging
from collections.abc import Mapping
from typing import List

from pydantic import ValidationError

from .schemas import MaterialFields, ProductSelection, QuoteConfiguration

logger = logging.getLogger(__name__)

# Synthetic product built from the legacy flat fields. Priced, but not
# reported in the product breakdown.
LEGACY_PRODUCT_ID = "__legacy__"


class InvalidConfigurationError(ValueError):
    """The caller sent something that is not a quote configuration at all."""


def coerce_configuration(data) -> QuoteConfiguration:
    if isinstance(data, QuoteConfiguration):
        return data
    if not isinstance(data, Mapping):
        raise InvalidConfigurationError(
            f"Quote configuration must be an object, got {type(data).__name__}"
        )
    try:
        return QuoteConfiguration.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidConfigurationError(str(e)) from e


def has_legacy_selection(config: QuoteConfiguration) -> bool:
    return bool(config.pieces) or config.material_source is not None


def legacy_product(config: QuoteConfiguration) -> ProductSelection:
    fields = {name: getattr(config, name) for name in MaterialFields.model_fields}
    return ProductSelection(
        id=LEGACY_PRODUCT_ID,
        quantity=1,
        pieces=config.pieces,
        **fields,
    )


def normalize_products(config: QuoteConfiguration) -> List[ProductSelection]:
    """
    Selected products win. Legacy fields are only consulted when no product
    was selected; when both are present the legacy fields are ignored.
    """
    if config.selected_products:
        products = []
        for product in config.selected_products:
            if not product.pieces and product.id in config.product_pieces:
                product = product.model_copy(
                    update={"pieces": config.product_pieces[product.id]}
                )
            products.append(product)
        return products

    if has_legacy_selection(config):
        logger.debug("No selected products, pricing legacy single-product fields")
        return [legacy_product(config)]

    return []
