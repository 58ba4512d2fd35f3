"""
Processing and add-on cost rules.

Each rule is independent: a gate on the configuration and a rate from
PricingRates. Basic processing and optional add-ons only apply to the full
"Fabrication, Delivery & Installation" service. Sinks apply at every service
level. Delivery needs a service level that includes delivery.

evaluate_rules() always returns every line; an inactive line is 0.0.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .rates import PricingRates
from .schemas import DeliveryLocation, QuoteConfiguration, ServiceLevel, SinkCategory, SinkType

PER_SQM = "per_sqm"
FLAT = "flat"
PER_UNIT = "per_unit"

# Breakdown fields produced by the rules, in subtotal order
LINE_ITEMS = (
    "cutting",
    "top_polishing",
    "polishing",
    "butt_joint_polish",
    "custom_edge",
    "hob_cut_out",
    "drain_grooves",
    "small_holes",
    "sink_cost",
    "delivery",
    "installation",
)

DELIVERY_SERVICE_LEVELS = (ServiceLevel.FABRICATION_DELIVERY, ServiceLevel.FULL_SERVICE)


def is_full_service(config: QuoteConfiguration) -> bool:
    return config.service_level == ServiceLevel.FULL_SERVICE


def includes_delivery(config: QuoteConfiguration) -> bool:
    return config.service_level in DELIVERY_SERVICE_LEVELS


def _client_sink(sink_type):
    def gate(config):
        return config.sink_category == SinkCategory.CLIENT and config.sink_type == sink_type
    return gate


@dataclass(frozen=True)
class CostRule:
    field: str
    rate: str
    basis: str
    gate: Callable[[QuoteConfiguration], bool]
    units: Optional[Callable[[QuoteConfiguration], int]] = None

    def amount(self, config: QuoteConfiguration, total_sqm: float, rates: PricingRates) -> float:
        if not self.gate(config):
            return 0.0
        rate = getattr(rates, self.rate)
        if self.basis == PER_SQM:
            return total_sqm * rate
        if self.basis == PER_UNIT:
            return self.units(config) * rate
        return rate


COST_RULES = (
    # Basic processing
    CostRule("cutting", "cutting_per_sqm", PER_SQM, is_full_service),
    CostRule("top_polishing", "top_polishing_per_sqm", PER_SQM, is_full_service),
    CostRule("polishing", "polishing_per_sqm", PER_SQM, is_full_service),

    # Optional add-ons (client selection)
    CostRule("butt_joint_polish", "butt_joint_polish_per_sqm", PER_SQM,
             lambda c: is_full_service(c) and c.butt_joint_polish),
    CostRule("custom_edge", "custom_edge_flat", FLAT,
             lambda c: is_full_service(c) and c.custom_edge_addon),
    CostRule("hob_cut_out", "hob_cut_out_flat", FLAT,
             lambda c: is_full_service(c) and c.hob_cut_out_addon),
    CostRule("drain_grooves", "drain_grooves_flat", FLAT,
             lambda c: is_full_service(c) and c.drain_grooves_addon),
    CostRule("small_holes", "small_hole_each", PER_UNIT,
             lambda c: is_full_service(c) and c.small_holes > 0,
             units=lambda c: c.small_holes),

    # Sinks: one category only
    CostRule("sink_cost", "sink_client_under_mounted", FLAT, _client_sink(SinkType.UNDER_MOUNTED)),
    CostRule("sink_cost", "sink_client_top_mounted", FLAT, _client_sink(SinkType.TOP_MOUNTED)),
    CostRule("sink_cost", "sink_luxone_package", FLAT,
             lambda c: c.sink_category == SinkCategory.LUXONE),

    # Packing & delivery: anything that is not Dubai is "other emirates"
    CostRule("delivery", "delivery_dubai", FLAT,
             lambda c: includes_delivery(c) and c.delivery_location == DeliveryLocation.DUBAI),
    CostRule("delivery", "delivery_other_uae", FLAT,
             lambda c: includes_delivery(c) and c.delivery_location != DeliveryLocation.DUBAI),

    CostRule("installation", "installation_per_sqm", PER_SQM, is_full_service),
)


def evaluate_rules(config: QuoteConfiguration, total_sqm: float,
                   rates: PricingRates = None) -> Dict[str, float]:
    rates = rates or PricingRates()
    lines = {field: 0.0 for field in LINE_ITEMS}
    for rule in COST_RULES:
        lines[rule.field] += rule.amount(config, total_sqm, rates)
    return lines


def product_processing_cost(area: float, service_level, rates: PricingRates = None) -> float:
    """Per-product processing figure for the product breakdown. Not part of the subtotal."""
    rates = rates or PricingRates()
    if service_level != ServiceLevel.FULL_SERVICE:
        return 0.0
    return area * rates.product_processing_per_sqm
