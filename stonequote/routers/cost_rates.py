from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel, ValidationError
from typing import Optional
from .. import models
from ..database import get_db
from ..rates import DEFAULT_RATES, PricingRates, rates_from_overrides

router = APIRouter(prefix="/cost-rates", tags=["cost-rates"])


class CostRateUpdate(BaseModel):
    value: float
    description: Optional[str] = None
    is_active: Optional[bool] = None


def seed_cost_rates(db: Session) -> int:
    """Insert the default rate table. Skips rates that already exist."""
    seeded = 0
    for name, data in DEFAULT_RATES.items():
        existing = db.query(models.CostRate).filter(models.CostRate.name == name).first()
        if not existing:
            db.add(models.CostRate(name=name, **data))
            seeded += 1
    db.commit()
    return seeded


def load_rates(db: Session) -> PricingRates:
    """Active admin overrides on top of the documented defaults."""
    rows = db.query(models.CostRate).filter(models.CostRate.is_active.is_(True)).all()
    return rates_from_overrides({row.name: row.value for row in rows})


@router.get("/seed")
def seed_rates(db: Session = Depends(get_db)):
    """Seed default cost rates. Safe to run multiple times: skips existing."""
    return {"ok": True, "seeded": seed_cost_rates(db)}


@router.get("/")
def list_cost_rates(db: Session = Depends(get_db)):
    rates = db.query(models.CostRate).order_by(models.CostRate.id).all()
    return [
        {
            "id": r.id,
            "name": r.name,
            "value": r.value,
            "unit": r.unit,
            "description": r.description,
            "is_active": r.is_active,
            "updated_at": r.updated_at,
        }
        for r in rates
    ]


@router.get("/effective")
def effective_rates(db: Session = Depends(get_db)):
    """The rate table the calculator will actually use."""
    return load_rates(db).model_dump()


@router.patch("/{name}")
def update_cost_rate(name: str, update: CostRateUpdate, db: Session = Depends(get_db)):
    rate = db.query(models.CostRate).filter(models.CostRate.name == name).first()
    if not rate:
        raise HTTPException(status_code=404, detail="Cost rate not found: run /cost-rates/seed first")
    try:
        PricingRates(**{name: update.value})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid value for {name}: {e.errors()[0]['msg']}")
    rate.value = update.value
    if update.description:
        rate.description = update.description
    if update.is_active is not None:
        rate.is_active = update.is_active
    db.commit()
    db.refresh(rate)
    return {"name": rate.name, "value": rate.value, "is_active": rate.is_active}
