import json
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, SecretStr, field_validator
from typing import Annotated, Optional, List

class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "School Registry API"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False)

    # Database Settings
    DATABASE_URL: str = Field(...)
    DB_ECHO: bool = Field(default=False)

    # Authentication Settings
    SECRET_KEY: SecretStr = Field(...)
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=30)
    BCRYPT_ROUNDS: int = Field(default=12)

    # CORS Settings
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ]
    )

    # Rate Limiting Settings
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100)
    RATE_LIMIT_TIME_WINDOW: int = Field(default=15 * 60)
    # Peers allowed to report the client address through X-Forwarded-For
    TRUSTED_PROXIES: Annotated[List[str], NoDecode] = Field(default_factory=list)

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)

    # Bootstrap superadmin, created at startup when none exists
    SUPER_ADMIN_EMAIL: Optional[str] = Field(default=None)
    SUPER_ADMIN_USERNAME: str = Field(default="superadmin")
    SUPER_ADMIN_PASSWORD: Optional[SecretStr] = Field(default=None)

    @field_validator("ALLOWED_ORIGINS", "TRUSTED_PROXIES", mode="before")
    @classmethod
    def parse_address_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def get_jwt_key(self) -> str:
        """Return the raw secret used for signing tokens"""
        return self.SECRET_KEY.get_secret_value()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

# Initialize settings
settings = Settings()
