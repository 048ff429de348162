"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..sources.models import SourceConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "ICALAGENDA_"


class DisplaySettings(BaseModel):
    """Agenda display options."""

    date_format: str = Field(default="%a %b %d", description="strftime pattern for dates")
    time_format: str = Field(default="%H:%M", description="strftime pattern for times")
    show_past_events: bool = Field(
        default=False, description="Start the agenda window a week before today"
    )
    days_ahead: int = Field(default=14, ge=0, description="Agenda window length in days")
    group_by_date: bool = Field(default=True, description="Group events under date headers")
    show_all_day: bool = Field(default=True, description="Include all-day events")
    show_tasks: bool = Field(default=True, description="Include the task list")
    show_completed_tasks: bool = Field(default=False, description="Include completed tasks")


class IconSettings(BaseModel):
    """Markers used by the console renderer (empty strings disable them)."""

    task: str = Field(default="☐", description="Pending task marker")
    task_done: str = Field(default="☑", description="Completed task marker")
    location: str = Field(default="@", description="Location prefix")
    recurring: str = Field(default="↻", description="Recurring occurrence marker")
    all_day: str = Field(default="◷", description="All-day event marker")


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to data_dir/logs)"
    )
    file_prefix: str = Field(default="icalagenda", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


_SECTION_MODELS: Dict[str, type] = {
    "display": DisplaySettings,
    "icons": IconSettings,
    "logging": LoggingSettings,
}


class AgendaSettings(BaseSettings):
    """Application settings with environment variable and YAML support.

    Precedence: constructor arguments, then ``ICALAGENDA_*`` environment
    variables, then the YAML file, then defaults.
    """

    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)
    _config_file: Optional[Path] = PrivateAttr(default=None)

    # Calendar sources
    calendars: List[SourceConfig] = Field(
        default_factory=list, description="Calendar files and directories"
    )

    # File Paths
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "icalagenda")
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local" / "share" / "icalagenda")

    display: DisplaySettings = Field(default_factory=DisplaySettings)
    icons: IconSettings = Field(default_factory=IconSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, config_file: Optional[Union[str, Path]] = None, **kwargs: Any) -> None:
        """Initialize settings.

        Args:
            config_file: Explicit YAML file; the default locations are
                searched when omitted
            **kwargs: Field values overriding every other source
        """
        env_vars_set = {
            key[len(ENV_PREFIX) :].lower().split("__")[0]
            for key in os.environ
            if key.upper().startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set
        self._load_yaml_config(config_file)

    @property
    def config_file(self) -> Optional[Path]:
        """YAML file the settings were loaded from, if any."""
        return self._config_file

    @property
    def log_dir(self) -> Path:
        """Directory for log files."""
        if self.logging.file_directory:
            return Path(self.logging.file_directory).expanduser()
        return self.data_dir / "logs"

    def _find_config_file(self, explicit: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Find config file: explicit path, then project directory, then user home."""
        if explicit is not None:
            path = Path(explicit).expanduser()
            if path.is_file():
                return path
            logger.warning(f"Config file not found: {path}")
            return None

        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _is_overridden(self, name: str) -> bool:
        return name in self._explicit_args or name in self._env_vars_set

    def _load_yaml_config(self, explicit: Optional[Union[str, Path]] = None) -> None:
        """Load configuration from YAML file if it exists.

        Unreadable or invalid files are logged and leave the settings as they
        are.
        """
        config_file = self._find_config_file(explicit)
        if not config_file:
            return

        try:
            with config_file.open(encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load YAML config from {config_file}: {e}")
            return

        if not config_data:
            self._config_file = config_file
            return

        if not isinstance(config_data, dict):
            logger.warning(f"Ignoring {config_file}: top level must be a mapping")
            return

        try:
            updates = self._collect_updates(config_data)
        except (ValidationError, TypeError) as e:
            logger.warning(f"Invalid configuration in {config_file}: {e}")
            return

        for name, value in updates.items():
            setattr(self, name, value)

        self._config_file = config_file
        logger.debug(f"Loaded configuration from {config_file}")

    def _collect_updates(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate every YAML section before any of them is applied."""
        updates: Dict[str, Any] = {}

        if "calendars" in config_data and not self._is_overridden("calendars"):
            updates["calendars"] = [
                SourceConfig.model_validate(entry) for entry in config_data["calendars"] or []
            ]

        for section, model in _SECTION_MODELS.items():
            if section not in config_data or self._is_overridden(section):
                continue
            merged = {**getattr(self, section).model_dump(), **(config_data[section] or {})}
            updates[section] = model.model_validate(merged)

        for path_setting in ("config_dir", "data_dir"):
            if path_setting in config_data and not self._is_overridden(path_setting):
                updates[path_setting] = Path(config_data[path_setting]).expanduser()

        return updates

