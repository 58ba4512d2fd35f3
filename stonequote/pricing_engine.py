"""
Pricing Engine.

Turns a QuoteConfiguration into a PricingBreakdown.
Pure math over injected collaborators: the material catalog and the rate table.

Pipeline:
    normalize -> areas -> material costs -> processing/add-on rules
              -> subtotal -> margin -> VAT -> grand total -> breakdown

Nothing is cached between calls. Money is AED, unrounded; rounding to 2
decimals belongs to whoever displays it.
"""

import asyncio
import logging

from .area import aggregate_areas, product_area, slabs_required
from .config import settings
from .material_catalog import MaterialCatalog, StaticMaterialCatalog
from .material_cost import MaterialCostResolver
from .normalize import coerce_configuration, normalize_products
from .processing_rules import LINE_ITEMS, evaluate_rules, product_processing_cost
from .rates import PricingRates
from .schemas import PricingBreakdown, ProductBreakdown, QuoteConfiguration

logger = logging.getLogger(__name__)

_UNSET = object()


def apply_margin(subtotal: float, rates: PricingRates) -> dict:
    """
    margin              = subtotal x margin rate
    subtotal_with_margin = subtotal + margin
    vat                 = subtotal_with_margin x VAT rate
    grand_total         = subtotal_with_margin + vat
    """
    margin = subtotal * rates.margin_rate
    subtotal_with_margin = subtotal + margin
    vat = subtotal_with_margin * rates.vat_rate
    return {
        "subtotal": subtotal,
        "margin": margin,
        "subtotal_with_margin": subtotal_with_margin,
        "vat": vat,
        "grand_total": subtotal_with_margin + vat,
    }


class PricingEngine:
    """
    Stateless quote calculator.

    Safe to share between requests and to call concurrently: every call
    builds its own MaterialCostResolver.
    """

    def __init__(self, catalog: MaterialCatalog = None, rates: PricingRates = None,
                 lookup_timeout=_UNSET):
        self.catalog = catalog or StaticMaterialCatalog()
        self.rates = rates or PricingRates()
        if lookup_timeout is _UNSET:
            lookup_timeout = settings.CATALOG_LOOKUP_TIMEOUT_SECONDS
        self.lookup_timeout = lookup_timeout

    async def calculate(self, configuration) -> PricingBreakdown:
        """
        Args:
            configuration: QuoteConfiguration, or the wizard's JSON as a dict

        Returns:
            PricingBreakdown with every field present

        Raises:
            InvalidConfigurationError: configuration is structurally wrong
                (e.g. selectedProducts is not a list). Missing or malformed
                optional values never raise.
        """
        config = coerce_configuration(configuration)
        products = normalize_products(config)

        # --- Areas ---
        areas = aggregate_areas(products)
        product_areas = [product_area(p) for p in products]

        # --- Material (lookups for different products run concurrently) ---
        resolver = MaterialCostResolver(self.catalog, timeout=self.lookup_timeout)
        material_costs = await asyncio.gather(*(
            resolver.product_cost(product, area)
            for product, area in zip(products, product_areas)
        ))
        material_cost = sum(material_costs, 0.0)

        # --- Processing, add-ons, sink, delivery, installation ---
        lines = evaluate_rules(config, areas.total_sqm, self.rates)

        subtotal = material_cost + sum(lines[field] for field in LINE_ITEMS)
        totals = apply_margin(subtotal, self.rates)

        breakdown = self.compose(
            config, products, product_areas, material_costs,
            material_cost, lines, totals, areas.total_sqm,
        )
        logger.debug(
            "Priced quote: %d products, %.3f sqm, material %.2f, subtotal %.2f, total %.2f",
            len(products), areas.total_sqm, material_cost, subtotal, totals["grand_total"],
        )
        return breakdown

    def calculate_sync(self, configuration) -> PricingBreakdown:
        """For callers without an event loop (scripts, sync routes)."""
        return asyncio.run(self.calculate(configuration))

    def compose(self, config: QuoteConfiguration, products, product_areas, material_costs,
                material_cost: float, lines: dict, totals: dict,
                total_sqm: float) -> PricingBreakdown:
        """Assemble the breakdown. No arithmetic beyond the per-product totals."""
        product_breakdown = {}
        # Only selected products are reported; the legacy single product is priced silently
        reported = zip(products, product_areas, material_costs) if config.selected_products else ()
        for product, area, cost in reported:
            processing = product_processing_cost(area, config.service_level, self.rates)
            product_breakdown[product.id] = ProductBreakdown(
                product_type=product.product_type.value if product.product_type else None,
                quantity=product.quantity,
                area=area,
                material_cost=cost,
                processing_cost=processing,
                total_cost=cost + processing,
            )

        return PricingBreakdown(
            material_cost=material_cost,
            **lines,
            **totals,
            total_sqm=total_sqm,
            slabs_required=slabs_required(total_sqm, self.rates.slab_area_sqm),
            product_breakdown=product_breakdown,
        )


async def calculate_pricing(configuration, catalog: MaterialCatalog = None,
                            rates: PricingRates = None) -> PricingBreakdown:
    """One-shot helper: build an engine and price a single configuration."""
    return await PricingEngine(catalog=catalog, rates=rates).calculate(configuration)
