"""
Material Cost Resolver.

One material cost per product, by material source:
- luxone:        product area x catalog price per sqm
- yourself:      0 (customer-owned slabs)
- luxone-others: required slabs x price per slab (whole slabs, area is irrelevant)

A catalog miss, error or timeout costs that one product its material line
(0 AED, logged) and nothing else. The quote still prices as an estimate.
"""

import asyncio
import logging
from typing import Dict, Optional, Tuple

from .material_catalog import DEFAULT_FINISH, DEFAULT_THICKNESS, MaterialCatalog
from .parsing import parse_int, parse_number, parse_price
from .schemas import MaterialSource, ProductSelection

logger = logging.getLogger(__name__)


class MaterialCostResolver:
    """
    Resolves material costs for one calculation.

    Lookups are memoised on (colour, finish, thickness) for the life of the
    resolver only; the engine builds a fresh resolver per call.
    """

    def __init__(self, catalog: MaterialCatalog, timeout: Optional[float] = None):
        self.catalog = catalog
        self.timeout = timeout
        self._lookups: Dict[Tuple[str, str, str], asyncio.Future] = {}

    async def product_cost(self, product: ProductSelection, area: float) -> float:
        source = product.material_source
        if source == MaterialSource.LUXONE:
            return await self._luxone_cost(product, area)
        if source == MaterialSource.LUXONE_OTHERS:
            return self.luxone_others_cost(product)
        return 0.0

    @staticmethod
    def luxone_others_cost(product: ProductSelection) -> float:
        required_slabs = max(parse_int(product.required_slabs, default=0), 0)
        price_per_slab = parse_price(product.price_per_slab, default=0.0)
        return required_slabs * price_per_slab

    async def _luxone_cost(self, product: ProductSelection, area: float) -> float:
        if not product.material_color:
            return 0.0
        finish = product.finish or DEFAULT_FINISH
        thickness = product.thickness or DEFAULT_THICKNESS
        price = await self.price_per_sqm(product.material_color, finish, thickness)
        if price is None:
            return 0.0
        return area * price

    def price_per_sqm(self, color_name: str, finish: str, thickness: str) -> asyncio.Future:
        key = (color_name.strip().lower(), finish.strip().lower(), thickness.strip().lower())
        lookup = self._lookups.get(key)
        if lookup is None:
            lookup = asyncio.ensure_future(self._lookup(color_name.strip(), finish, thickness))
            self._lookups[key] = lookup
        return lookup

    async def _lookup(self, color_name: str, finish: str, thickness: str) -> Optional[float]:
        try:
            pending = self.catalog.resolve_price(color_name, finish, thickness)
            if self.timeout:
                raw = await asyncio.wait_for(pending, self.timeout)
            else:
                raw = await pending
        except asyncio.TimeoutError:
            logger.warning("Material lookup timed out after %ss: %s / %s / %s",
                           self.timeout, color_name, finish, thickness)
            return None
        except Exception as e:
            logger.warning("Material lookup failed for %s / %s / %s: %s",
                           color_name, finish, thickness, e)
            return None

        if raw is None:
            logger.warning("Material not found: %s / %s / %s", color_name, finish, thickness)
            return None
        price = parse_number(raw, default=None)
        if price is None or price < 0:
            logger.warning("Unusable catalog price %r for %s", raw, color_name)
            return None
        return price
