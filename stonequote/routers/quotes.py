from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
import logging
import math
from .. import models, schemas
from ..area import area_usage
from ..config import settings
from ..database import get_db
from ..material_catalog import FallbackMaterialCatalog, SqlMaterialCatalog
from ..normalize import InvalidConfigurationError, coerce_configuration
from ..pricing_engine import PricingEngine
from .cost_rates import load_rates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


def generate_quote_id(db: Session) -> str:
    count = db.query(models.Quotation).count()
    year = datetime.utcnow().year
    return f"{settings.QUOTE_ID_PREFIX}-{year}-{str(count + 1).zfill(4)}"


def build_engine(db: Session) -> PricingEngine:
    """Engine wired to the admin price list (published list as fallback) and admin rates."""
    catalog = FallbackMaterialCatalog(SqlMaterialCatalog(db))
    return PricingEngine(catalog=catalog, rates=load_rates(db))


def _configuration(payload: dict) -> schemas.QuoteConfiguration:
    try:
        return coerce_configuration(payload)
    except InvalidConfigurationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid quote configuration: {e}")


@router.post("/calculate", response_model=schemas.PricingBreakdown)
def calculate_quote(payload: dict = Body(...), db: Session = Depends(get_db)):
    """Live price preview: called on every relevant wizard change. Stores nothing."""
    config = _configuration(payload)
    return build_engine(db).calculate_sync(config)


@router.post("/area-usage", response_model=List[schemas.ProductAreaUsage])
def product_area_usage(payload: dict = Body(...), db: Session = Depends(get_db)):
    """Available vs. used area per product, for the sizes step."""
    config = _configuration(payload)
    rates = load_rates(db)
    usages = []
    for product in config.selected_products:
        usage = area_usage(product, rates)
        unlimited = usage.available is not None and math.isinf(usage.available)
        usages.append(schemas.ProductAreaUsage(
            product_id=product.id,
            product_type=product.product_type.value if product.product_type else None,
            available_area=None if unlimited else usage.available,
            used_area=usage.used,
            remaining_area=None if unlimited else usage.remaining,
            unlimited=unlimited,
            exceeded=usage.exceeded,
        ))
    return usages


@router.post("/", response_model=schemas.QuotationRecord)
def submit_quote(payload: dict = Body(...), db: Session = Depends(get_db)):
    """Final submission: price once more and store configuration + breakdown."""
    config = _configuration(payload)
    breakdown = build_engine(db).calculate_sync(config)

    quotation = models.Quotation(
        quote_id=generate_quote_id(db),
        customer_name=config.name or "",
        customer_email=config.email or "",
        customer_phone=config.contact_number or "",
        customer_location=config.location or "",
        service_level=config.service_level.value if config.service_level else "",
        project_type=config.project_type or "",
        timeline=config.timeline or "",
        quote_data=config.model_dump(mode="json", by_alias=True, exclude_none=True),
        pricing_data=breakdown.model_dump(mode="json", by_alias=True),
        total_area=breakdown.total_sqm,
        total_amount=breakdown.grand_total,
        currency=settings.CURRENCY,
    )
    db.add(quotation)
    db.commit()
    db.refresh(quotation)
    logger.info("Stored quote %s: %.2f %s", quotation.quote_id,
                quotation.total_amount, quotation.currency)
    return quotation


@router.get("/", response_model=List[schemas.QuotationRecord])
def list_quotes(db: Session = Depends(get_db)):
    return db.query(models.Quotation).order_by(models.Quotation.created_at.desc()).all()


@router.get("/{quote_id}", response_model=schemas.QuotationRecord)
def get_quote(quote_id: str, db: Session = Depends(get_db)):
    quotation = db.query(models.Quotation).filter(models.Quotation.quote_id == quote_id).first()
    if not quotation:
        raise HTTPException(status_code=404, detail="Quote not found")
    return quotation
