"""
Material price lookup with fallback chain:
1. material_options table (admin-edited price list)
2. DEFAULT_MATERIALS from this file (published Luxone price list)

The pricing engine only knows the MaterialCatalog protocol, so tests can
hand it a StaticMaterialCatalog and never touch a database.

All prices are AED per square metre.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Protocol

from sqlalchemy.orm import Session

from . import models
from .schemas import MaterialCatalogEntry

logger = logging.getLogger(__name__)

DEFAULT_FINISH = "Polished"
DEFAULT_THICKNESS = "20mm"


def _quartz(color_name: str, price: float, finish: str = DEFAULT_FINISH) -> MaterialCatalogEntry:
    return MaterialCatalogEntry(
        name=color_name,
        color_name=color_name,
        finish=finish,
        thickness=DEFAULT_THICKNESS,
        price_per_sqm=price,
    )


# Luxone quartz price list: 3200x1600mm slabs, 20mm
DEFAULT_MATERIALS = [
    _quartz("Golden River", 280.00),
    _quartz("The Grold", 280.00),
    _quartz("Megistic White", 260.00),
    _quartz("Royal Statuario", 280.00),
    _quartz("White Pazzal", 320.00),
    _quartz("Universe Grey", 280.00),
    _quartz("The Saint", 320.00),
    _quartz("The Saint", 350.00, finish="Matt"),
    _quartz("Super Wave", 320.00),
    _quartz("White Beauty", 320.00),
    _quartz("Grey Leather", 280.00, finish="Leather"),
    _quartz("Strike Light", 280.00),
    _quartz("Grey Wonder", 320.00),
    _quartz("Supreme Taj", 320.00),
    _quartz("Golden Track", 320.00),
    _quartz("The Ambience", 320.00, finish="Leather"),
    _quartz("The Glacier", 320.00),
    _quartz("Imperial White", 320.00),
    _quartz("Ambience Touch", 320.00),
    _quartz("Amazed Grey", 320.00),
    _quartz("Moon White", 220.00),
]


def _norm(value) -> str:
    return str(value or "").strip().lower()


def matches(entry: MaterialCatalogEntry, color_name: str, finish: str, thickness: str) -> bool:
    """Colour must match; a catalog entry without finish/thickness matches any."""
    if _norm(entry.color_name) != _norm(color_name):
        return False
    if entry.finish and _norm(entry.finish) != _norm(finish):
        return False
    if entry.thickness and _norm(entry.thickness) != _norm(thickness):
        return False
    return True


def find_entry(entries: Iterable[MaterialCatalogEntry], color_name: str,
               finish: str = DEFAULT_FINISH,
               thickness: str = DEFAULT_THICKNESS) -> Optional[MaterialCatalogEntry]:
    if not _norm(color_name):
        return None
    for entry in entries:
        if matches(entry, color_name, finish, thickness):
            return entry
    return None


class MaterialCatalog(Protocol):
    async def resolve_price(self, color_name: str, finish: str,
                            thickness: str) -> Optional[float]:
        """Price per sqm, or None when the material is not in the catalog."""
        ...


class StaticMaterialCatalog:
    """In-memory catalog. Defaults to the published price list."""

    def __init__(self, entries: Iterable[MaterialCatalogEntry] = None):
        self.entries = list(DEFAULT_MATERIALS if entries is None else entries)

    async def resolve_price(self, color_name: str, finish: str = DEFAULT_FINISH,
                            thickness: str = DEFAULT_THICKNESS) -> Optional[float]:
        entry = find_entry(self.entries, color_name, finish, thickness)
        return entry.price_per_sqm if entry else None


class SqlMaterialCatalog:
    """
    Catalog backed by the material_options table.

    Rows are loaded once per instance, so create one per request; a quote
    with five products costs one query. The query runs in the default
    executor so a slow database can be timed out like any other lookup.
    """

    def __init__(self, db: Session):
        self.db = db
        self._loading = None

    def _load(self) -> List[MaterialCatalogEntry]:
        rows = (
            self.db.query(models.MaterialOption)
            .filter(models.MaterialOption.is_available.is_(True))
            .order_by(models.MaterialOption.display_order, models.MaterialOption.id)
            .all()
        )
        logger.debug("Loaded %d material options", len(rows))
        return [
            MaterialCatalogEntry(
                category=row.category or models.MaterialCategory.QUARTZ,
                brand=row.brand or "",
                name=row.name,
                color_name=row.color_name,
                finish=row.finishing,
                thickness=row.thickness,
                price_per_sqm=row.price_per_sqm or 0.0,
                slab_size=row.slab_size or "",
            )
            for row in rows
        ]

    async def entries(self) -> List[MaterialCatalogEntry]:
        if self._loading is None:
            loop = asyncio.get_running_loop()
            self._loading = loop.run_in_executor(None, self._load)
        # Shared by every lookup; one timed-out lookup must not cancel it for the rest
        return await asyncio.shield(self._loading)

    async def resolve_price(self, color_name: str, finish: str = DEFAULT_FINISH,
                            thickness: str = DEFAULT_THICKNESS) -> Optional[float]:
        entry = find_entry(await self.entries(), color_name, finish, thickness)
        return entry.price_per_sqm if entry else None


class FallbackMaterialCatalog:
    """
    Tries the primary catalog, then the fallback on a miss or an error.
    Mirrors the storefront: live price list first, published list second.
    """

    def __init__(self, primary: MaterialCatalog, fallback: MaterialCatalog = None):
        self.primary = primary
        self.fallback = fallback or StaticMaterialCatalog()

    async def resolve_price(self, color_name: str, finish: str = DEFAULT_FINISH,
                            thickness: str = DEFAULT_THICKNESS) -> Optional[float]:
        try:
            price = await self.primary.resolve_price(color_name, finish, thickness)
        except Exception as e:
            logger.warning("Primary material catalog failed for %r (%s), using fallback",
                           color_name, e)
            price = None
        if price is not None:
            return price
        return await self.fallback.resolve_price(color_name, finish, thickness)
