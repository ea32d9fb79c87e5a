"""
Configuration for DOM history tracking, read from the environment.
"""

from dataclasses import dataclass, field
import os
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, '')
    return tuple(item.strip() for item in raw.split(',') if item.strip())


@dataclass
class DOMHistoryConfig:
    """Application configuration"""
    delay_ms: int = int(os.getenv("DOM_HISTORY_DELAY_MS", "10000"))
    headless: bool = os.getenv("DOM_HISTORY_HEADLESS", "true").lower() in ["true", "1", "yes"]
    navigation_timeout_ms: int = int(os.getenv("DOM_HISTORY_NAV_TIMEOUT_MS", "30000"))
    log_level: str = os.getenv("DOM_HISTORY_LOG_LEVEL", "INFO").upper()
    report_title: str = os.getenv("DOM_HISTORY_REPORT_TITLE", "DOM tree changes")
    ignored_attributes: Tuple[str, ...] = field(default_factory=lambda: _env_list("DOM_HISTORY_IGNORED_ATTRIBUTES"))
    port: int = int(os.getenv("PORT", "5000"))


config = DOMHistoryConfig()
