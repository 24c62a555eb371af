from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    DATABASE_URL: str = "sqlite+aiosqlite:///./listings.db"

    # --- Minimal admin auth (API key) ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- File listing (drive folder with property images) ---
    FILE_LISTING_SOURCE: str = "google_drive"  # google_drive|local_dir
    GOOGLE_DRIVE_API_KEY: str | None = None
    GOOGLE_DRIVE_API_URL: str = "https://www.googleapis.com/drive/v3/files"
    GOOGLE_DRIVE_PAGE_SIZE: int = 1000
    LOCAL_DRIVE_ROOT: str = "data/drive"

    # --- Outbound HTTP ---
    HTTP_TIMEOUT_S: float = 20.0
    HTTP_MAX_RETRIES: int = 2
    HTTP_BACKOFF_BASE_S: float = 0.5
    HTTP_RATE_LIMIT_RPS: float = 5.0
    HTTP_CIRCUIT_FAIL_THRESHOLD: int = 5
    HTTP_CIRCUIT_RESET_S: float = 60.0

    # --- Per-call bounds for a run ---
    FILE_LISTING_TIMEOUT_S: float = 60.0
    STORE_CALL_TIMEOUT_S: float = 30.0

    # --- Bulk ingestion ---
    INGEST_BATCH_SIZE: int = 20
    INGEST_TARGET_CITY: str = "hyderabad"
    INGEST_TABLE: str = "properties"
    PLACEHOLDER_IMAGE_URL: str = "/images/placeholder-property.png"

    # Used when no active agent exists yet; swap for a real agent before going live
    FALLBACK_AGENT_ID: str = "11111111-1111-1111-1111-111111111111"

    DEFAULT_AMENITIES: list[str] = [
        "Swimming Pool",
        "Gym",
        "Clubhouse",
        "Children Play Area",
        "Landscaped Gardens",
        "24/7 Security",
        "Power Backup",
        "Covered Parking",
        "Jogging Track",
        "Indoor Games",
    ]
    DEFAULT_OWNERSHIP_TYPE: str = "Resale"
    DEFAULT_POSSESSION_STATUS: str = "Ready to Move"

    # --- Reference data seeding ---
    SEED_PROJECT_MICROMARKET_SAMPLE: int = 10
    SEED_PROJECT_DEVELOPERS_PER_MARKET: int = 2


settings = Settings()
