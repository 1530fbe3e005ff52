from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Seatmapper API"
    API_V1_STR: str = "/api/v1"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "12345"
    POSTGRES_DB: str = "seatmapper_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Editor engine
    HISTORY_LIMIT: int = 50
    MAX_BACKGROUND_SIZE_MB: int = 10

    # All lengths below are normalized canvas units
    NUDGE_FINE: float = 0.001
    NUDGE_COARSE: float = 0.01
    DUPLICATE_OFFSET: float = 0.02
    LASSO_MIN_DRAG: float = 0.005
    SPATIAL_TOLERANCE: float = 0.005
    ZONE_MARGIN: float = 0.01
    DEFAULT_SEAT_W: float = 0.02
    DEFAULT_SEAT_H: float = 0.02
    DEFAULT_AISLE_WIDTH: float = 0.04

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def max_background_bytes(self) -> int:
        return self.MAX_BACKGROUND_SIZE_MB * 1024 * 1024

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
