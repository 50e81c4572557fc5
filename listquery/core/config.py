from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PAGINATION_DEFAULT_OFFSET: int = 0
    PAGINATION_DEFAULT_LIMIT: int = 100
    PAGINATION_MAX_LIMIT: int = 0  # 0 = no upper bound

    @property
    def max_limit(self) -> int | None:
        return self.PAGINATION_MAX_LIMIT if self.PAGINATION_MAX_LIMIT > 0 else None

settings = Settings()
