"""
Pricing rate table.

Every rate the engine uses lives here with its documented default. The admin
"Cost Management" screen stores overrides in the cost_rates table; the API
layer turns those rows into a PricingRates via rates_from_overrides() and
injects it into the engine. Nothing in the engine reads a literal rate.

All money is AED.
"""

import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PricingRates(BaseModel):
    # Business
    margin_rate: float = Field(0.20, ge=0)          # company profit on subtotal
    vat_rate: float = Field(0.05, ge=0)             # UAE VAT on subtotal + margin

    # Geometry
    slab_area_sqm: float = Field(5.12, gt=0)        # 3.2m x 1.6m standard slab
    mm_threshold: float = Field(100.0, gt=0)        # slab sizes above this are millimetres
    island_available_area: float = Field(10.24, ge=0)
    backsplash_available_area: float = Field(20.58, ge=0)

    # Basic processing: full service only
    cutting_per_sqm: float = Field(40.0, ge=0)
    top_polishing_per_sqm: float = Field(80.0, ge=0)
    polishing_per_sqm: float = Field(40.0, ge=0)

    # Optional add-ons: full service only
    butt_joint_polish_per_sqm: float = Field(50.0, ge=0)
    custom_edge_flat: float = Field(200.0, ge=0)
    hob_cut_out_flat: float = Field(100.0, ge=0)
    drain_grooves_flat: float = Field(250.0, ge=0)
    small_hole_each: float = Field(25.0, ge=0)

    # Sinks: any service level
    sink_client_under_mounted: float = Field(250.0, ge=0)
    sink_client_top_mounted: float = Field(200.0, ge=0)
    sink_luxone_package: float = Field(900.0, ge=0)

    # Delivery & installation
    delivery_dubai: float = Field(500.0, ge=0)
    delivery_other_uae: float = Field(800.0, ge=0)
    installation_per_sqm: float = Field(80.0, ge=0)

    # Per-product processing figure shown in the product breakdown
    product_processing_per_sqm: float = Field(100.0, ge=0)

    model_config = {"frozen": True}


_DEFAULTS = PricingRates()

# Seed data for the cost_rates table: unit + description per rate
DEFAULT_RATES = {
    "margin_rate": {"unit": "ratio", "description": "Company profit (20% of subtotal)"},
    "vat_rate": {"unit": "ratio", "description": "UAE VAT (5% of subtotal with profit)"},
    "slab_area_sqm": {"unit": "sqm", "description": "Standard slab area used for slab count"},
    "mm_threshold": {"unit": "number", "description": "Slab size values above this are read as millimetres"},
    "island_available_area": {"unit": "sqm", "description": "Fixed available area for Island products"},
    "backsplash_available_area": {"unit": "sqm", "description": "Fixed available area for Backsplash products"},
    "cutting_per_sqm": {"unit": "AED/sqm", "description": "Cutting"},
    "top_polishing_per_sqm": {"unit": "AED/sqm", "description": "Top polishing / mitred"},
    "polishing_per_sqm": {"unit": "AED/sqm", "description": "Edge polishing"},
    "butt_joint_polish_per_sqm": {"unit": "AED/sqm", "description": "Butt joint & polish add-on"},
    "custom_edge_flat": {"unit": "AED", "description": "Custom edge add-on (one-time)"},
    "hob_cut_out_flat": {"unit": "AED", "description": "Hob cut out add-on (one-time)"},
    "drain_grooves_flat": {"unit": "AED", "description": "Drain grooves add-on (one set)"},
    "small_hole_each": {"unit": "AED/hole", "description": "Small holes (tap, soap dispenser)"},
    "sink_client_under_mounted": {"unit": "AED", "description": "Client sink, under mounted"},
    "sink_client_top_mounted": {"unit": "AED", "description": "Client sink, top mounted"},
    "sink_luxone_package": {"unit": "AED", "description": "Luxone complete sink package"},
    "delivery_dubai": {"unit": "AED", "description": "Packing & delivery within Dubai"},
    "delivery_other_uae": {"unit": "AED", "description": "Packing & delivery to other emirates"},
    "installation_per_sqm": {"unit": "AED/sqm", "description": "Installation"},
    "product_processing_per_sqm": {"unit": "AED/sqm", "description": "Processing figure per product line"},
}
for _name, _data in DEFAULT_RATES.items():
    _data["value"] = getattr(_DEFAULTS, _name)


def rates_from_overrides(overrides: dict) -> PricingRates:
    """
    Build a PricingRates from {name: value} overrides.

    Unknown names and invalid values (negative, non-numeric) are skipped so a
    bad admin edit never takes the quote calculator down.
    """
    values = {}
    for name, value in (overrides or {}).items():
        if name not in PricingRates.model_fields:
            logger.warning("Ignoring unknown cost rate %r", name)
            continue
        try:
            PricingRates(**{name: value})
        except (ValueError, TypeError):
            logger.warning("Ignoring invalid cost rate %s=%r", name, value)
            continue
        values[name] = value
    return PricingRates(**values)
