from pydantic_settings import BaseSettings
from functools import lru_cache

DEFAULT_SESSION_SECRET = "change_me_for_demo"
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    Uses pydantic for validation and type safety.
    """
    environment: str = "development"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 3000

    # Signs the session cookie; changing it invalidates all existing cookies
    session_secret_key: str = DEFAULT_SESSION_SECRET

    # In-memory database: nothing survives a restart
    database_url: str = "sqlite://"

    # Fixed lifetime from login, not sliding
    session_expire_hours: int = 1

    cookie_name: str = "sid"
    cookie_samesite: str = "lax"

    # Protected artifact served by /flag
    protected_dir: str = "public"
    flag_filename: str = "flag.txt"

    # Newline-delimited employee directory used by /search
    employees_path: str = "data/users.txt"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        # secure=True requires HTTPS, only enforced for production deployments
        return self.is_production

    @property
    def uses_default_secret(self) -> bool:
        return self.session_secret_key == DEFAULT_SESSION_SECRET

    def check_secret(self) -> None:
        """
        Refuse to run in production with the demo secret or a weak one.
        Raises RuntimeError; development mode only gets a warning from the caller.
        """
        if not self.is_production:
            return
        if self.uses_default_secret:
            raise RuntimeError("SESSION_SECRET_KEY must be set in production")
        if len(self.session_secret_key) < MIN_SECRET_LENGTH:
            raise RuntimeError(
                f"SESSION_SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters in production"
            )


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance. Load once, reuse throughout application lifecycle.
    """
    return Settings()
