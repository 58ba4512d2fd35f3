"""
Processing and add-on rule table tests.

Tests:
1-2. Every line is always reported, zero when inactive
3-5. Add-on gates, sinks, delivery location
6.   Per-product processing figure
"""

import pytest

from stonequote.processing_rules import (
    COST_RULES, LINE_ITEMS, evaluate_rules, product_processing_cost,
)
from stonequote.rates import PricingRates
from stonequote.schemas import QuoteConfiguration, ServiceLevel


def _config(**fields):
    return QuoteConfiguration.model_validate(fields)


def test_every_line_is_reported_even_when_inactive():
    lines = evaluate_rules(_config(), total_sqm=4.0)
    assert set(lines) == set(LINE_ITEMS)
    assert all(value == 0 for value in lines.values())


def test_every_rule_writes_a_reported_line_with_a_known_rate():
    for rule in COST_RULES:
        assert rule.field in LINE_ITEMS
        assert rule.rate in PricingRates.model_fields


def test_add_ons_need_their_flag_and_full_service():
    full = ServiceLevel.FULL_SERVICE.value
    assert evaluate_rules(_config(serviceLevel=full), 2.0)["custom_edge"] == 0
    lines = evaluate_rules(_config(serviceLevel=full, customEdgeAddon=True,
                                   hobCutOutAddon="true", drainGroovesAddon=1,
                                   smallHoles="4"), 2.0)
    assert lines["custom_edge"] == 200
    assert lines["hob_cut_out"] == 100
    assert lines["drain_grooves"] == 250
    assert lines["small_holes"] == 100
    assert lines["butt_joint_polish"] == 0


def test_flat_add_ons_do_not_scale_with_area():
    full = ServiceLevel.FULL_SERVICE.value
    small = evaluate_rules(_config(serviceLevel=full, hobCutOutAddon=True), 1.0)
    large = evaluate_rules(_config(serviceLevel=full, hobCutOutAddon=True), 50.0)
    assert small["hob_cut_out"] == large["hob_cut_out"] == 100


@pytest.mark.parametrize("location, expected", [
    ("dubai", 500),
    ("Dubai", 500),
    ("other", 800),
    ("other-uae", 800),
    (None, 800),
])
def test_delivery_by_location(location, expected):
    lines = evaluate_rules(_config(serviceLevel="fabrication-delivery",
                                   deliveryLocation=location), 3.0)
    assert lines["delivery"] == expected


def test_rates_are_read_from_the_injected_table():
    rates = PricingRates(cutting_per_sqm=55.0, sink_luxone_package=1200.0)
    lines = evaluate_rules(_config(serviceLevel="fabrication-delivery-installation",
                                   sinkCategory="luxone"), 2.0, rates)
    assert lines["cutting"] == 110
    assert lines["sink_cost"] == 1200


def test_product_processing_cost_only_for_full_service():
    assert product_processing_cost(2.5, ServiceLevel.FULL_SERVICE) == 250
    assert product_processing_cost(2.5, ServiceLevel.FABRICATION_DELIVERY) == 0
    assert product_processing_cost(2.5, None) == 0
