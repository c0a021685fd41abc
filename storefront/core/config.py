from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "Storefront Cart API"
    DATABASE_URL: str = "sqlite:///./storefront.db"
    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 1 week

    # Cart storage slot (one per storage origin)
    CART_STORAGE_KEY: str = "cartItems"
    DEFAULT_STORAGE_ORIGIN: str = "default"

    # Pricing (cart page summary)
    CURRENCY: str = "KES"
    FREE_SHIPPING_THRESHOLD: float = 10000
    FLAT_SHIPPING_FEE: float = 500
    TAX_RATE: float = Field(0.08, ge=0, le=1)

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
