from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db
from ..material_catalog import DEFAULT_MATERIALS

router = APIRouter(prefix="/materials", tags=["materials"])


def seed_material_options(db: Session) -> int:
    """Insert the published price list. Skips colour/finish/thickness rows that already exist."""
    seeded = 0
    for order, entry in enumerate(DEFAULT_MATERIALS):
        existing = db.query(models.MaterialOption).filter(
            models.MaterialOption.color_name == entry.color_name,
            models.MaterialOption.finishing == entry.finish,
            models.MaterialOption.thickness == entry.thickness,
        ).first()
        if not existing:
            db.add(models.MaterialOption(
                category=entry.category,
                brand=entry.brand,
                name=entry.name,
                color_name=entry.color_name,
                finishing=entry.finish,
                thickness=entry.thickness,
                price_per_sqm=entry.price_per_sqm,
                slab_size=entry.slab_size,
                display_order=order,
            ))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed_materials(db: Session = Depends(get_db)):
    """Seed the default material price list. Safe to run multiple times."""
    return {"ok": True, "seeded": seed_material_options(db)}


@router.get("/", response_model=List[schemas.MaterialOption])
def list_materials(category: models.MaterialCategory = None, db: Session = Depends(get_db)):
    query = db.query(models.MaterialOption)
    if category:
        query = query.filter(models.MaterialOption.category == category)
    return query.order_by(models.MaterialOption.display_order, models.MaterialOption.id).all()


@router.post("/", response_model=schemas.MaterialOption)
def create_material(material: schemas.MaterialOptionCreate, db: Session = Depends(get_db)):
    option = models.MaterialOption(**material.model_dump())
    db.add(option)
    db.commit()
    db.refresh(option)
    return option


@router.patch("/{material_id}", response_model=schemas.MaterialOption)
def update_material(material_id: int, update: schemas.MaterialOptionUpdate, db: Session = Depends(get_db)):
    option = db.query(models.MaterialOption).filter(models.MaterialOption.id == material_id).first()
    if not option:
        raise HTTPException(status_code=404, detail="Material not found")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(option, field, value)
    db.commit()
    db.refresh(option)
    return option


@router.delete("/{material_id}")
def delete_material(material_id: int, db: Session = Depends(get_db)):
    option = db.query(models.MaterialOption).filter(models.MaterialOption.id == material_id).first()
    if not option:
        raise HTTPException(status_code=404, detail="Material not found")
    db.delete(option)
    db.commit()
    return {"ok": True}
