# Standard library imports
import os
from typing import Final, Optional
from dotenv import load_dotenv


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Load environment variables from .env file
        load_dotenv()

        # Timezone Configuration
        # Default to UTC, but can be set via TIMEZONE env var (e.g., "UTC", "Europe/Helsinki", "Asia/Tokyo")
        self.timezone: Final[str] = os.getenv("TIMEZONE", "UTC")

        # Logging
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()

        # Public URL used in outgoing e-mails (invitation links etc.)
        self.public_url: Final[str] = os.getenv("PUBLIC_URL", "http://localhost:8000")

        # Storage backend: "memory" keeps everything in-process, "mongo" persists to MongoDB
        self.storage_backend: Final[str] = os.getenv("STORAGE_BACKEND", "memory").lower()

        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("DB_NAME", "wayfarer")

        # Collection Names
        self.regions_collection: Final[str] = os.getenv("REGIONS_COLLECTION", "regions")
        self.places_collection: Final[str] = os.getenv("PLACES_COLLECTION", "places")
        self.checkins_collection: Final[str] = os.getenv("CHECKINS_COLLECTION", "checkins")
        self.checkin_photos_collection: Final[str] = os.getenv("CHECKIN_PHOTOS_COLLECTION", "checkin_photos")
        self.region_favorites_collection: Final[str] = os.getenv("REGION_FAVORITES_COLLECTION", "region_favorites")
        self.place_favorites_collection: Final[str] = os.getenv("PLACE_FAVORITES_COLLECTION", "place_favorites")
        self.region_pins_collection: Final[str] = os.getenv("REGION_PINS_COLLECTION", "region_pins")
        self.place_permissions_collection: Final[str] = os.getenv("PLACE_PERMISSIONS_COLLECTION", "place_permissions")
        self.reports_collection: Final[str] = os.getenv("REPORTS_COLLECTION", "reports")
        self.users_collection: Final[str] = os.getenv("USERS_COLLECTION", "users")
        self.sessions_collection: Final[str] = os.getenv("SESSIONS_COLLECTION", "sessions")
        self.password_reset_tokens_collection: Final[str] = os.getenv(
            "PASSWORD_RESET_TOKENS_COLLECTION", "password_reset_tokens"
        )

        # Check-in Configuration
        self.checkin_max_distance_meters: Final[int] = int(
            os.getenv("CHECKIN_MAX_DISTANCE_METERS", "500")
        )

        # Session Configuration
        self.session_expiry_hours: Final[int] = int(
            os.getenv("SESSION_EXPIRY_HOURS", str(24 * 7))  # 7 days
        )

        # File uploads (local storage adapter)
        self.upload_directory: Final[str] = os.getenv(
            "UPLOAD_DIRECTORY",
            os.path.join(os.getcwd(), "uploads")  # Default: ./uploads
        )
        self.upload_base_url: Final[str] = os.getenv("UPLOAD_BASE_URL", "http://localhost:8000/uploads")

        # Geocoding (OpenStreetMap Nominatim)
        self.nominatim_url: Final[str] = os.getenv(
            "NOMINATIM_URL",
            "https://nominatim.openstreetmap.org"
        )
        self.geocoder_user_agent: Final[str] = os.getenv(
            "GEOCODER_USER_AGENT",
            "wayfarer-core/1.0"
        )
        self.geocoder_timeout_seconds: Final[float] = float(
            os.getenv("GEOCODER_TIMEOUT_SECONDS", "10")
        )


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
