from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Boolean, JSON, Enum
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class MaterialCategory(str, enum.Enum):
    QUARTZ = "quartz"
    PORCELAIN = "porcelain"


# --- Tables ---

class MaterialOption(Base):
    """Admin-edited material price list: one row per colour/finish/thickness."""
    __tablename__ = "material_options"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(Enum(MaterialCategory), default=MaterialCategory.QUARTZ)
    brand = Column(String, default="Luxone")
    name = Column(String, nullable=False)
    color_name = Column(String, nullable=False, index=True)
    finishing = Column(String, nullable=True)   # NULL matches any finish
    thickness = Column(String, nullable=True)   # NULL matches any thickness
    price_per_sqm = Column(Float, nullable=False, default=0.0)
    slab_size = Column(String, default="3200x1600mm")
    is_available = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CostRate(Base):
    """Overrides for the pricing rate table, keyed by PricingRates field name."""
    __tablename__ = "cost_rates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    value = Column(Float, nullable=False)
    unit = Column(String, default="AED")
    description = Column(String)
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Quotation(Base):
    """Submitted quote: configuration and breakdown stored as opaque JSON."""
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(String, unique=True, nullable=False)
    customer_name = Column(String, default="")
    customer_email = Column(String, default="")
    customer_phone = Column(String, default="")
    customer_location = Column(String, default="")
    service_level = Column(String, default="")
    project_type = Column(String, default="")
    timeline = Column(String, default="")
    quote_data = Column(JSON, default=dict)     # QuoteConfiguration snapshot
    pricing_data = Column(JSON, nullable=True)  # PricingBreakdown snapshot
    total_area = Column(Float, default=0.0)
    total_amount = Column(Float, default=0.0)
    currency = Column(String, default="AED")
    status = Column(Enum(QuoteStatus), default=QuoteStatus.PENDING)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
