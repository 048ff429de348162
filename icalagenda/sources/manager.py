"""Source manager keeping the calendar registry and loading its records."""

import logging
from typing import Any, List, Optional, Union

from ..ics.exceptions import ICSError
from .exceptions import SourceConfigError, SourceError, SourceNotFoundError
from .file_source import ICS_EXTENSIONS, ICSFileSourceHandler
from .models import SourceConfig, SourceLoadResult, expand_path

logger = logging.getLogger(__name__)

DEFAULT_COLORS = ["#87CEEB", "#FFD700", "#98FB98", "#DDA0DD", "#F0E68C", "#E6E6FA"]


class SourceManager:
    """Manages configured calendar sources."""

    def __init__(self, settings: Any = None):
        """Initialize source manager.

        Args:
            settings: Application settings; its ``calendars`` seed the registry
        """
        self.settings = settings
        self._calendars: List[SourceConfig] = list(getattr(settings, "calendars", None) or [])

        logger.debug(f"Source manager initialized with {len(self._calendars)} calendars")

    @property
    def calendars(self) -> List[SourceConfig]:
        """Configured calendars in registration order."""
        return list(self._calendars)

    def add_calendar(
        self,
        path: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
        recursive: bool = False,
    ) -> bool:
        """Register a calendar file or directory.

        Args:
            path: File or directory path (``~`` is expanded)
            name: Calendar name, defaults to the file stem
            color: Display color, defaults to the next palette entry
            recursive: Scan subdirectories of a directory source

        Returns:
            True if the calendar was added, False otherwise
        """
        try:
            config = self._build_config(path, name, color, recursive)
        except SourceNotFoundError as e:
            logger.error(f"Failed to add calendar: {e.message}")
            return False
        except SourceConfigError as e:
            logger.warning(f"Failed to add calendar: {e.message}")
            return False

        self._calendars.append(config)
        logger.info(f"Added calendar '{config.name}' from {path}")
        return True

    def _build_config(
        self, path: str, name: Optional[str], color: Optional[str], recursive: bool
    ) -> SourceConfig:
        if not path:
            raise SourceConfigError("Calendar path is required", name)

        expanded = expand_path(path)
        if not expanded.exists():
            raise SourceNotFoundError(f"Path not found: {expanded}", name)

        for existing in self._calendars:
            if existing.expanded_path == expanded:
                raise SourceConfigError(f"Calendar already added: {expanded}", existing.name)

        return SourceConfig(
            name=name or expanded.stem,
            path=path,
            color=color or DEFAULT_COLORS[len(self._calendars) % len(DEFAULT_COLORS)],
            recursive=recursive,
        )

    def remove_calendar(self, identifier: Union[str, int]) -> bool:
        """Remove a calendar by name or 1-based index.

        Returns:
            True if a calendar was removed, False otherwise
        """
        index = self._find_index(identifier)
        if index is None:
            logger.error(f"Calendar not found: {identifier}")
            return False

        removed = self._calendars.pop(index)
        logger.info(f"Removed calendar '{removed.name}'")
        return True

    def _find_index(self, identifier: Union[str, int]) -> Optional[int]:
        if isinstance(identifier, int) and not isinstance(identifier, bool):
            position = identifier
        else:
            for index, calendar in enumerate(self._calendars):
                if calendar.name == identifier:
                    return index
            if not str(identifier).isdigit():
                return None
            position = int(identifier)

        if 1 <= position <= len(self._calendars):
            return position - 1
        return None

    def list_calendars(self) -> List[str]:
        """Describe each calendar with its path status.

        Returns:
            One line per calendar, e.g. ``1. work: ~/cal (3 files) [recursive]``
        """
        lines = []
        for number, calendar in enumerate(self._calendars, start=1):
            path = calendar.expanded_path
            if path.is_file():
                status = "(file)"
            elif path.is_dir():
                try:
                    count = sum(
                        1
                        for child in path.iterdir()
                        if child.suffix.lower() in ICS_EXTENSIONS and child.is_file()
                    )
                except OSError as e:
                    logger.warning(f"Cannot list calendar directory {path}: {e}")
                    status = "(unreadable!)"
                else:
                    status = f"({count} files)"
                    if calendar.recursive:
                        status += " [recursive]"
            else:
                status = "(not found!)"
            lines.append(f"{number}. {calendar.name or path.stem}: {calendar.path} {status}")
        return lines

    def load_calendars(self) -> SourceLoadResult:
        """Load records from every enabled calendar.

        A failing source is reported as a warning and never affects the
        others.
        """
        merged = SourceLoadResult()

        for calendar in self._calendars:
            if not calendar.enabled:
                logger.debug(f"Skipping disabled calendar {calendar.name or calendar.path}")
                continue
            try:
                merged.merge(ICSFileSourceHandler(calendar).load())
            except (SourceError, ICSError) as e:
                message = f"Failed to load calendar {calendar.name or calendar.path}: {e}"
                logger.warning(message)
                merged.warnings.append(message)

        logger.info(
            f"Loaded {len(merged.events)} events and {len(merged.tasks)} tasks "
            f"from {len(self._calendars)} calendars"
        )
        return merged
