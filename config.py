"""
Settings of the salon availability service.
Values come from the environment, with a `.env` file next to this module.
"""

from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(dotenv_path=Path(__file__).parent / ".env")


class Settings(BaseSettings):
    """Typed service configuration."""

    # Supabase project holding calendars, services and appointments
    supabase_url: str = ""
    supabase_key: str = ""

    salon_name: str = "Salon"
    salon_config_id: str = "config"  # id of the single salon_config row

    # Grid between two candidate starts; must divide an hour
    slot_step_minutes: int = 15
    cache_ttl_minutes: int = 5

    log_level: str = "INFO"
    log_dir: str = "logs"

    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "development"  # development, staging, production

    # Calendar front end allowed by CORS
    frontend_origin: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def _invalid_fields(self) -> List[str]:
        invalid = [
            name
            for name in ("supabase_url", "supabase_key")
            if not getattr(self, name) or getattr(self, name).lower().startswith("your_")
        ]
        if self.slot_step_minutes <= 0 or 60 % self.slot_step_minutes != 0:
            invalid.append("slot_step_minutes")
        return invalid

    def validate_all_required(self) -> None:
        """
        Check the settings the API cannot start without.

        Raises:
            ValueError: Listing every missing or invalid field
        """
        invalid = self._invalid_fields()
        if invalid:
            raise ValueError(
                f"Missing or invalid configuration: {', '.join(invalid)}. "
                f"Set them in the environment or in .env (see .env.example)."
            )


settings = Settings()
