"""Configuration management"""
from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()


@dataclass
class ConfirmationConfig:
    """Confirmation flow configuration"""
    # Token lifetime (the confirmation page must be answered within this window)
    ttl_seconds: int = 600
    # Lifetime of the flashed form data handed to the resumed handler
    flash_ttl_seconds: int = 60

    # Store backend: "memory" or "sql"
    store_backend: str = "memory"
    database_url: str = "sqlite:///./confirmations.db"

    # Background expiry sweep, 0 disables it
    sweep_interval_seconds: int = 60

    # Routing
    confirmation_page_path: str = "/Confirmation"
    error_page_path: str = "/Error/General"
    flash_cookie_name: str = "confirmation_flash"

    log_level: str = "INFO"

    def __post_init__(self):
        self.store_backend = self.store_backend.strip().lower()
        if self.store_backend not in ("memory", "sql"):
            raise ValueError(f"Unknown confirmation store backend: {self.store_backend}")
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self.flash_ttl_seconds <= 0:
            raise ValueError("flash_ttl_seconds must be positive")

    @classmethod
    def from_env(cls) -> "ConfirmationConfig":
        """Build configuration from environment variables"""
        return cls(
            ttl_seconds=int(os.getenv("CONFIRMATION_TTL_SECONDS", "600")),
            flash_ttl_seconds=int(os.getenv("CONFIRMATION_FLASH_TTL_SECONDS", "60")),
            store_backend=os.getenv("CONFIRMATION_STORE", "memory"),
            database_url=os.getenv("CONFIRMATION_DATABASE_URL", "sqlite:///./confirmations.db"),
            sweep_interval_seconds=int(os.getenv("CONFIRMATION_SWEEP_INTERVAL_SECONDS", "60")),
            confirmation_page_path=os.getenv("CONFIRMATION_PAGE_PATH", "/Confirmation"),
            error_page_path=os.getenv("ERROR_PAGE_PATH", "/Error/General"),
            flash_cookie_name=os.getenv("CONFIRMATION_FLASH_COOKIE", "confirmation_flash"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> dict:
        """Convert to a dict (diagnostics)"""
        return {
            "ttl_seconds": self.ttl_seconds,
            "flash_ttl_seconds": self.flash_ttl_seconds,
            "store_backend": self.store_backend,
            "database_url": self.database_url,
            "sweep_interval_seconds": self.sweep_interval_seconds,
            "confirmation_page_path": self.confirmation_page_path,
            "error_page_path": self.error_page_path,
            "flash_cookie_name": self.flash_cookie_name,
            "log_level": self.log_level,
        }
