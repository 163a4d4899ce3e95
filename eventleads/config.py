from typing import Optional

from pydantic_settings import BaseSettings

DEFAULT_SEARCH_URL = "https://www.eventbrite.com/d/tx--houston/lecture/"
DEFAULT_PAGES = "1-2"


class Settings(BaseSettings):
    # Spidra scraping API
    spidra_api_key: str = ""
    spidra_base_url: str = ""

    # What to scrape
    search_url: str = DEFAULT_SEARCH_URL
    pages: str = DEFAULT_PAGES

    output_dir: str = "output"

    # Timing (seconds)
    poll_interval: float = 2.0
    page_delay: float = 1.0
    item_delay: float = 1.0
    poll_timeout: Optional[float] = None
    request_timeout: float = 30.0

    model_config = {"env_file": ".env", "extra": "ignore"}

    def missing(self) -> list[str]:
        """Return env var names of required settings that are not set."""
        required = {
            "SPIDRA_API_KEY": self.spidra_api_key,
            "SPIDRA_BASE_URL": self.spidra_base_url,
        }
        return [name for name, value in required.items() if not value.strip()]
