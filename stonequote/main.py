from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import quotes, materials, cost_rates

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("stonequote")

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Stone Worktop Quotation API",
    description=f"Quotation wizard pricing for {settings.COMPANY_NAME}",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(quotes.router, prefix="/api")
app.include_router(materials.router, prefix="/api")
app.include_router(cost_rates.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "stonequote", "currency": settings.CURRENCY}


@app.on_event("startup")
def auto_seed():
    """Auto-seed the material price list and cost rates on first run."""
    from .database import SessionLocal
    db = SessionLocal()
    try:
        seeded_materials = materials.seed_material_options(db)
        seeded_rates = cost_rates.seed_cost_rates(db)
        if seeded_materials or seeded_rates:
            logger.info("Seeded %d material options and %d cost rates",
                        seeded_materials, seeded_rates)
    finally:
        db.close()
