import os
from pydantic import BaseModel


class Settings(BaseModel):
    api_key: str = os.getenv("API_KEY", "change-me")

    # JWT
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_audience: str | None = os.getenv("JWT_AUDIENCE")
    jwt_issuer: str | None = os.getenv("JWT_ISSUER")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "3600"))

    # Persistence: "memory" or "file"
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")
    storage_dir: str = os.getenv("STORAGE_DIR", os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "storage")))
    storage_namespace: str = os.getenv("STORAGE_NAMESPACE", "sizefit_")
    history_limit: int = int(os.getenv("HISTORY_LIMIT", "50"))

    # Optional JSON file replacing the built-in brand table
    brand_data_path: str | None = os.getenv("BRAND_DATA_PATH")
    default_product_type: str = os.getenv("DEFAULT_PRODUCT_TYPE", "shirt")

    # Rate limit (token bucket)
    rate_limit_per_min: int = int(os.getenv("RATE_LIMIT_PER_MIN", "60"))
    rate_limit_burst: int = int(os.getenv("RATE_LIMIT_BURST", "30"))


settings = Settings()
