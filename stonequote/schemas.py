from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from collections.abc import Mapping
from typing import Any, Dict, List, Optional
from datetime import datetime
import enum

from .models import QuoteStatus, MaterialCategory
from .parsing import as_text, parse_flag, parse_int


# --- Wizard enums ---

class ServiceLevel(str, enum.Enum):
    FABRICATION = "fabrication"
    FABRICATION_DELIVERY = "fabrication-delivery"
    FULL_SERVICE = "fabrication-delivery-installation"


class MaterialSource(str, enum.Enum):
    LUXONE = "luxone"
    YOURSELF = "yourself"
    LUXONE_OTHERS = "luxone-others"


class ProductType(str, enum.Enum):
    KITCHEN_TOP = "Kitchen Top"
    ISLAND = "Island"
    BACKSPLASH = "Backsplash"
    BAR_BQ_COUNTER = "Bar BQ Counter"
    FLOORING = "Flooring"
    WALLS = "Walls"
    STAIRCASE = "Staircase"


class SinkCategory(str, enum.Enum):
    CLIENT = "client"
    LUXONE = "luxone"


class SinkType(str, enum.Enum):
    UNDER_MOUNTED = "under-mounted"
    TOP_MOUNTED = "top-mounted"
    COMPLETE_PACKAGE = "complete-package"


class DeliveryLocation(str, enum.Enum):
    DUBAI = "dubai"
    OTHER = "other"


# Older wizard builds sent "other-uae"
_ENUM_ALIASES = {
    DeliveryLocation: {"other-uae": DeliveryLocation.OTHER},
}


def _lenient_enum(enum_cls, value):
    """Unknown or blank values collapse to None instead of failing validation."""
    if value is None or isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    alias = _ENUM_ALIASES.get(enum_cls, {}).get(text.lower())
    if alias is not None:
        return alias
    for member in enum_cls:
        if member.value == text or member.value.lower() == text.lower():
            return member
    return None


class WizardModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# --- Quote configuration (input) ---

class Piece(WizardModel):
    length: Any = None
    width: Any = None
    thickness: Any = None
    area: Any = None  # cached by the UI, never trusted


def _piece_map(value):
    """None becomes {}; null or blank piece entries are dropped."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        return value
    return {key: piece for key, piece in value.items() if isinstance(piece, (Mapping, Piece))}


class MaterialFields(WizardModel):
    """Material selection fields shared by a product and the legacy flat shape."""
    material_source: Optional[MaterialSource] = None
    material_type: Optional[MaterialCategory] = None
    material_color: Optional[str] = None

    # "Luxone" and "By Yourself" options
    finish: Optional[str] = None
    thickness: Optional[str] = None
    slab_size: Optional[str] = None
    number_of_slabs: Any = None

    # "Luxone Others" option
    luxone_others_slab_size: Optional[str] = None
    luxone_others_thickness: Optional[str] = None
    luxone_others_finish: Optional[str] = None
    luxone_others_color_name: Optional[str] = None
    required_slabs: Any = None
    price_per_slab: Any = None
    brand_supplier: Optional[str] = None

    @field_validator("material_source", mode="before")
    @classmethod
    def _source(cls, v):
        return _lenient_enum(MaterialSource, v)

    @field_validator("material_type", mode="before")
    @classmethod
    def _material_type(cls, v):
        return _lenient_enum(MaterialCategory, v)

    @field_validator(
        "material_color", "finish", "thickness", "slab_size",
        "luxone_others_slab_size", "luxone_others_thickness", "luxone_others_finish",
        "luxone_others_color_name", "brand_supplier",
        mode="before",
    )
    @classmethod
    def _text(cls, v):
        return as_text(v)


class ProductSelection(MaterialFields):
    id: str
    product_type: Optional[ProductType] = None
    quantity: int = 1
    pieces: Dict[str, Piece] = Field(default_factory=dict)

    # UI conveniences: accepted, ignored by pricing
    total_available_area: Any = None
    total_used_area: Any = None
    remaining_area: Any = None

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        if isinstance(v, (str, int)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("product_type", mode="before")
    @classmethod
    def _product_type(cls, v):
        return _lenient_enum(ProductType, v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v):
        return max(parse_int(v, default=1), 1)

    @field_validator("pieces", mode="before")
    @classmethod
    def _pieces(cls, v):
        return _piece_map(v)


class QuoteConfiguration(MaterialFields):
    # Step 1: scope of work
    service_level: Optional[ServiceLevel] = None

    # Step 2: products (primary path)
    selected_products: List[ProductSelection] = Field(default_factory=list)
    product_pieces: Dict[str, Dict[str, Piece]] = Field(default_factory=dict)

    # Legacy single-product pieces
    pieces: Dict[str, Piece] = Field(default_factory=dict)

    # Step 5: add-ons
    butt_joint_polish: bool = False
    custom_edge_addon: bool = False
    hob_cut_out_addon: bool = False
    drain_grooves_addon: bool = False
    small_holes: int = 0

    sink_category: Optional[SinkCategory] = None
    sink_type: Optional[SinkType] = None

    # Step 8: contact
    delivery_location: Optional[DeliveryLocation] = None
    name: Optional[str] = None
    email: Optional[str] = None
    contact_number: Optional[str] = None
    location: Optional[str] = None
    project_type: Optional[str] = None
    timeline: Optional[str] = None
    worktop_layout: Optional[str] = None
    additional_comments: Optional[str] = None

    @field_validator("service_level", mode="before")
    @classmethod
    def _service_level(cls, v):
        return _lenient_enum(ServiceLevel, v)

    @field_validator("sink_category", mode="before")
    @classmethod
    def _sink_category(cls, v):
        return _lenient_enum(SinkCategory, v)

    @field_validator("sink_type", mode="before")
    @classmethod
    def _sink_type(cls, v):
        return _lenient_enum(SinkType, v)

    @field_validator("delivery_location", mode="before")
    @classmethod
    def _delivery_location(cls, v):
        return _lenient_enum(DeliveryLocation, v)

    @field_validator("selected_products", mode="before")
    @classmethod
    def _selected_products(cls, v):
        return [] if v is None else v

    @field_validator("pieces", mode="before")
    @classmethod
    def _pieces(cls, v):
        return _piece_map(v)

    @field_validator("product_pieces", mode="before")
    @classmethod
    def _product_pieces(cls, v):
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            return v
        return {
            product_id: _piece_map(pieces) if isinstance(pieces, Mapping) else {}
            for product_id, pieces in v.items()
        }

    @field_validator(
        "butt_joint_polish", "custom_edge_addon", "hob_cut_out_addon", "drain_grooves_addon",
        mode="before",
    )
    @classmethod
    def _flags(cls, v):
        return parse_flag(v)

    @field_validator("small_holes", mode="before")
    @classmethod
    def _small_holes(cls, v):
        return max(parse_int(v, default=0), 0)

    @field_validator(
        "name", "email", "contact_number", "location", "project_type", "timeline",
        "worktop_layout", "additional_comments",
        mode="before",
    )
    @classmethod
    def _contact_text(cls, v):
        return as_text(v)


# --- Pricing breakdown (output) ---

class ProductBreakdown(WizardModel):
    product_type: Optional[str] = None
    quantity: int = 1
    area: float = 0.0
    material_cost: float = 0.0
    processing_cost: float = 0.0
    total_cost: float = 0.0


class PricingBreakdown(WizardModel):
    material_cost: float = 0.0
    cutting: float = 0.0
    top_polishing: float = 0.0
    polishing: float = 0.0
    butt_joint_polish: float = 0.0
    custom_edge: float = 0.0
    hob_cut_out: float = 0.0
    drain_grooves: float = 0.0
    small_holes: float = 0.0
    sink_cost: float = 0.0
    installation: float = 0.0
    delivery: float = 0.0
    subtotal: float = 0.0
    margin: float = 0.0
    subtotal_with_margin: float = 0.0
    vat: float = 0.0
    grand_total: float = 0.0
    total_sqm: float = 0.0
    slabs_required: int = 0
    product_breakdown: Dict[str, ProductBreakdown] = Field(default_factory=dict)


class ProductAreaUsage(WizardModel):
    product_id: str
    product_type: Optional[str] = None
    available_area: Optional[float] = None  # None = slab details missing, or unlimited
    used_area: float = 0.0
    remaining_area: Optional[float] = None
    unlimited: bool = False                 # Luxone stock
    exceeded: bool = False


# --- Material catalog ---

class MaterialCatalogEntry(BaseModel):
    category: MaterialCategory = MaterialCategory.QUARTZ
    brand: str = "Luxone"
    name: str
    color_name: str
    finish: Optional[str] = None
    thickness: Optional[str] = None
    price_per_sqm: float
    slab_size: str = "3200x1600mm"


class MaterialOptionBase(BaseModel):
    category: MaterialCategory = MaterialCategory.QUARTZ
    brand: str = "Luxone"
    name: str
    color_name: str
    finishing: Optional[str] = None
    thickness: Optional[str] = None
    price_per_sqm: float
    slab_size: str = "3200x1600mm"
    is_available: bool = True
    display_order: int = 0
    description: Optional[str] = None

class MaterialOptionCreate(MaterialOptionBase):
    pass

class MaterialOptionUpdate(BaseModel):
    category: Optional[MaterialCategory] = None
    brand: Optional[str] = None
    name: Optional[str] = None
    color_name: Optional[str] = None
    finishing: Optional[str] = None
    thickness: Optional[str] = None
    price_per_sqm: Optional[float] = None
    slab_size: Optional[str] = None
    is_available: Optional[bool] = None
    display_order: Optional[int] = None
    description: Optional[str] = None

class MaterialOption(MaterialOptionBase):
    id: int
    updated_at: datetime
    class Config:
        from_attributes = True


# --- Stored quotations ---

class QuotationRecord(BaseModel):
    id: int
    quote_id: str
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    customer_location: str = ""
    service_level: str = ""
    project_type: str = ""
    timeline: str = ""
    quote_data: Dict[str, Any] = {}
    pricing_data: Optional[Dict[str, Any]] = None
    total_area: float = 0.0
    total_amount: float = 0.0
    currency: str = "AED"
    status: QuoteStatus
    created_at: datetime
    class Config:
        from_attributes = True
