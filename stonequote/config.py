from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./quotes.db"
    COMPANY_NAME: str = "Luxone Stone Worktops"
    COMPANY_EMAIL: str = "info@luxone.ae"
    COMPANY_PHONE: str = ""
    CURRENCY: str = "AED"
    QUOTE_ID_PREFIX: str = "LUX"
    LOG_LEVEL: str = "INFO"

    # Material catalog lookups are awaited per product; a slow catalog must not
    # stall the whole quote
    CATALOG_LOOKUP_TIMEOUT_SECONDS: float = 5.0

    class Config:
        env_file = ".env"


settings = Settings()
