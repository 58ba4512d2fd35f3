"""
Area Aggregator.

Reduces per-product piece geometry to square metres. Piece length and width
are always metres and are never auto-scaled. Slab sizes are a different story:
customers type "3.2x1.6" or "3200x1600", so parse_slab_size() detects the scale.

Available/used/remaining area is what the sizes step uses to stop customers
drawing more worktop than their slabs can cover. Pricing never reads it.
"""

import math
import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from .parsing import parse_int, parse_number
from .rates import PricingRates
from .schemas import MaterialSource, Piece, ProductSelection, ProductType

_SLAB_SIZE = re.compile(r"(\d+\.?\d*)\s*[x×]\s*(\d+\.?\d*)", re.IGNORECASE)


class AreaSummary(NamedTuple):
    total_sqm: float
    per_product: Dict[str, float]


class AreaUsage(NamedTuple):
    available: Optional[float]
    used: float
    remaining: Optional[float]
    exceeded: bool


def parse_dimension(value) -> Optional[float]:
    """A usable piece dimension in metres, or None when missing/invalid/negative."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    number = parse_number(value, default=None)
    if number is None or number < 0:
        return None
    return number


def piece_area(piece: Piece) -> Optional[float]:
    """length x width; None when either side is unusable (the piece is skipped)."""
    length = parse_dimension(piece.length)
    width = parse_dimension(piece.width)
    if length is None or width is None:
        return None
    return length * width


def used_area(product: ProductSelection) -> float:
    """Area of one unit of the product: complete pieces only."""
    total = 0.0
    for piece in product.pieces.values():
        area = piece_area(piece)
        if area is not None:
            total += area
    return total


def product_area(product: ProductSelection) -> float:
    return used_area(product) * product.quantity


def aggregate_areas(products: List[ProductSelection]) -> AreaSummary:
    per_product = {}
    total = 0.0
    for product in products:
        area = product_area(product)
        per_product[product.id] = per_product.get(product.id, 0.0) + area
        total += area
    # 3 decimals keeps slab count and per-sqm charges stable against float noise
    return AreaSummary(round(total, 3), per_product)


def slabs_required(total_sqm: float, slab_area_sqm: float = 5.12) -> int:
    if total_sqm <= 0:
        return 0
    return math.ceil(total_sqm / slab_area_sqm)


def parse_slab_size(text, mm_threshold: float = 100.0) -> Optional[Tuple[float, float]]:
    """
    Parse "LxW" into metres.

    Both numbers above mm_threshold means the customer typed millimetres
    ("3200x1600"); otherwise they are already metres ("3.2x1.6").
    """
    if not text:
        return None
    match = _SLAB_SIZE.search(str(text))
    if not match:
        return None
    length = float(match.group(1))
    width = float(match.group(2))
    if length > mm_threshold and width > mm_threshold:
        length /= 1000.0
        width /= 1000.0
    return length, width


def slab_area(text, slab_count, mm_threshold: float = 100.0) -> Optional[float]:
    size = parse_slab_size(text, mm_threshold)
    count = parse_int(slab_count, default=0)
    if size is None or count <= 0:
        return None
    return size[0] * size[1] * count


def fixed_available_area(product_type, rates: PricingRates) -> Optional[float]:
    if product_type == ProductType.ISLAND:
        return rates.island_available_area
    if product_type == ProductType.BACKSPLASH:
        return rates.backsplash_available_area
    return None


def available_area(product: ProductSelection, rates: PricingRates = None) -> Optional[float]:
    """
    How much material the customer has to work with.

    Island and Backsplash ship as fixed-size sets, so their slab fields are
    ignored. Luxone stock is unlimited. None means the slab details are
    still missing.
    """
    rates = rates or PricingRates()
    fixed = fixed_available_area(product.product_type, rates)
    if fixed is not None:
        return fixed

    source = product.material_source
    if source == MaterialSource.LUXONE:
        return math.inf
    if source == MaterialSource.YOURSELF:
        return slab_area(product.slab_size, product.number_of_slabs, rates.mm_threshold)
    if source == MaterialSource.LUXONE_OTHERS:
        return slab_area(product.luxone_others_slab_size, product.required_slabs, rates.mm_threshold)
    return 0.0


def area_usage(product: ProductSelection, rates: PricingRates = None) -> AreaUsage:
    available = available_area(product, rates)
    used = round(used_area(product), 3)
    if available is None:
        return AreaUsage(None, used, None, False)
    remaining = available - used
    return AreaUsage(available, used, remaining, used > available)
