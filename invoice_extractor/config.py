"""
Configuration module for Invoice Batch Extractor.

Handles settings for the Gemini API, batch limits, Excel export
and logging, with validation helpers for the UI and setup script.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

import requests
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-05-20"


@dataclass
class GeminiConfig:
    """Configuration for the Gemini generateContent API."""
    base_url: str = field(default_factory=lambda: os.getenv("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL))
    model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL))
    api_key: str = field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    mime_type: str = "image/jpeg"
    timeout: Optional[float] = None  # No client-side timeout on extraction calls

    @property
    def generate_url(self) -> str:
        """Endpoint for a single generateContent call."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def validate_api_key(self) -> tuple[bool, str]:
        """Validate the Gemini API key is set."""
        if not self.api_key:
            return False, (
                "Gemini API key not set.\n"
                "Set it via environment variable: GEMINI_API_KEY=your_key\n"
                "Or add it to the .env file."
            )
        return True, "Gemini API key is configured"

    def validate_connection(self) -> tuple[bool, str]:
        """Check the API is reachable and the key is accepted."""
        if not self.api_key:
            return False, "Gemini API key not set"
        try:
            response = requests.get(
                f"{self.base_url.rstrip('/')}/models",
                headers={"x-goog-api-key": self.api_key},
                timeout=5,
            )
            if response.status_code == 200:
                models = [m.get("name", "") for m in response.json().get("models", [])]
                if any(name.endswith(self.model) for name in models):
                    return True, f"Gemini connected. Model {self.model} is available"
                return True, f"Gemini connected, but model {self.model} was not listed"
            return False, f"Gemini returned status {response.status_code}"
        except requests.exceptions.ConnectionError:
            return False, "Cannot connect to the Gemini API. Check your network connection."
        except requests.exceptions.RequestException as e:
            return False, f"Error connecting to Gemini: {str(e)}"


@dataclass
class AppConfig:
    """Main application configuration."""
    gemini: GeminiConfig = field(default_factory=GeminiConfig)

    # Batch settings
    max_files: int = 10

    # Excel export settings
    export_file_name: str = "InvoiceData.xlsx"
    export_sheet_name: str = "Invoices"

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


def validate_system_requirements(config: Optional[AppConfig] = None) -> dict:
    """
    Validate runtime requirements on startup.

    Returns:
        Dictionary with validation results for each requirement.
    """
    config = config or get_config()
    results = {}

    key_ok, key_msg = config.gemini.validate_api_key()
    results["api_key"] = {
        "configured": key_ok,
        "message": key_msg,
    }

    if key_ok:
        reachable, message = config.gemini.validate_connection()
    else:
        reachable, message = False, "Skipped: no API key"
    results["gemini"] = {
        "available": reachable,
        "message": message,
        "model": config.gemini.model,
    }

    return results


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def update_config(**kwargs) -> AppConfig:
    """Update configuration with new values."""
    config = get_config()
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        elif hasattr(config.gemini, key):
            setattr(config.gemini, key, value)
    return config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
