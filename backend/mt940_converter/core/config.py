from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # CORS
    CORS_ORIGINS: str = "*"  # In prod: "https://converter.example.com"

    # Application
    PROJECT_NAME: str = "MT940 Converter API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    PARSER_LOG_LEVEL: Optional[str] = None  # e.g. "DEBUG" to trace account cleanup

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_EXTENSIONS: str = ".940,.mt940,.sta,.fin,.txt"

    # Parser policy
    DEFAULT_CREDIT_DEBIT_FLAG: Literal["C", "D"] = "C"  # used when a :61: line has no C/D mark
    CENTURY_PIVOT: int = 30  # YY <= pivot -> 20YY, else 19YY
    AMOUNT_PREFIX: str = ""  # masterbalance.nl exports use "R"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_extensions_list(self) -> List[str]:
        return [ext.strip().lower() for ext in self.ALLOWED_EXTENSIONS.split(",") if ext.strip()]


# Create a single instance to use across the app
settings = Settings()
