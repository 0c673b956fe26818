"""Configuration management for tasktriage."""

import logging
import os
from dataclasses import dataclass
from datetime import time
from pathlib import Path

from .core.insights import WEEKDAYS
from .core.schedule import ScheduleSettings

logger = logging.getLogger(__name__)

TRIAGE_HOME = Path(os.environ.get("TRIAGE_HOME", Path.home() / "triage"))
CONFIG_FILE = TRIAGE_HOME / "config" / "triage.conf"
DATA_DIR = TRIAGE_HOME / "data"

DEFAULT_AI_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_AI_MODEL = "google/gemini-3-flash-preview"


@dataclass
class Config:
    """tasktriage configuration."""

    tasks_file: str = str(DATA_DIR / "tasks.json")
    # Workday policy
    day_start: str = "09:00"
    day_end: str = "18:00"
    break_minutes: int = 15
    buffer_minutes: int = 5
    break_threshold_minutes: int = 60
    max_slots: int = 6
    week_start: str = "Sunday"
    # Prioritization
    prioritizer: str = "remote"
    ai_gateway_url: str = DEFAULT_AI_GATEWAY_URL
    ai_api_key: str = ""
    ai_model: str = DEFAULT_AI_MODEL
    ai_timeout: int = 60

    def schedule_settings(self) -> ScheduleSettings:
        """Build the core schedule policy from this config."""
        return ScheduleSettings(
            day_start=parse_clock(self.day_start),
            day_end=parse_clock(self.day_end),
            break_minutes=self.break_minutes,
            buffer_minutes=self.buffer_minutes,
            break_threshold_minutes=self.break_threshold_minutes,
            max_slots=self.max_slots,
        )


def parse_clock(value: str) -> time:
    """Parse 'HH:MM' into a time."""
    hour, _, minute = value.strip().partition(":")
    return time(int(hour), int(minute or 0))


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        number = int(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, keeping {default}")
        return default
    if number < 0:
        logger.warning(f"{key.upper()} must not be negative, keeping {default}")
        return default
    return number


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from triage.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if config_file.exists():
        _apply_file(config, config_file)

    env_key = os.environ.get("AI_GATEWAY_API_KEY")
    if env_key:
        config.ai_api_key = env_key

    return config


def _apply_file(config: Config, config_file: Path) -> None:
    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            if end_quote != -1:
                value = value[1:end_quote]
            else:
                value = value[1:]
        else:
            # Unquoted: strip inline comments
            if "#" in value:
                value = value.split("#")[0].strip()

        match key:
            case "tasks_file":
                config.tasks_file = str(Path(value).expanduser())
            case "day_start" | "day_end":
                try:
                    parse_clock(value)
                except ValueError:
                    logger.warning(f"Invalid {key.upper()} value {value!r}, expected HH:MM")
                    continue
                setattr(config, key, value)
            case "break_minutes" | "buffer_minutes" | "break_threshold_minutes" | "max_slots" | "ai_timeout":
                setattr(config, key, _parse_int(key, value, getattr(config, key)))
            case "week_start":
                if value.lower() not in WEEKDAYS:
                    logger.warning(f"Unknown WEEK_START {value!r}, keeping {config.week_start}")
                    continue
                config.week_start = value
            case "prioritizer":
                if value.lower() not in ("remote", "local"):
                    logger.warning(f"Unknown PRIORITIZER {value!r}, keeping {config.prioritizer}")
                    continue
                config.prioritizer = value.lower()
            case "ai_gateway_url":
                config.ai_gateway_url = value
            case "ai_api_key":
                config.ai_api_key = value
            case "ai_model":
                config.ai_model = value
