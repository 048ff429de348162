"""Local iCalendar file and directory source handler."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..ics import ICSParser
from ..ics.exceptions import ICSError
from ..ics.models import CalendarEvent, CalendarTask, ICSParseResult
from .exceptions import SourceError, SourceNotFoundError, SourceReadError
from .models import SourceConfig, SourceLoadResult

logger = logging.getLogger(__name__)

ICS_EXTENSIONS = (".ics", ".ical")
DEFAULT_CALENDAR_NAME = "Calendar"


class ICSFileSourceHandler:
    """Handler for a calendar stored as a file or a directory of files."""

    def __init__(self, config: SourceConfig, parser: Optional[ICSParser] = None):
        """Initialize file source handler.

        Args:
            config: Source configuration
            parser: Parser to use, a fresh one by default
        """
        self.config = config
        self.parser = parser or ICSParser()

    @property
    def label(self) -> str:
        """Name used in messages."""
        return self.config.name or self.config.path

    def resolve_files(self) -> List[Path]:
        """List the calendar files this source covers.

        A file path yields itself. A directory yields its direct ``.ics`` and
        ``.ical`` children, or every descendant when the source is recursive.

        Returns:
            Sorted, de-duplicated file paths

        Raises:
            SourceNotFoundError: If the path is neither file nor directory
            SourceReadError: If the directory cannot be listed
        """
        path = self.config.expanded_path

        if path.is_file():
            return [path]

        if not path.is_dir():
            raise SourceNotFoundError(f"Path not found: {path}", self.config.name)

        unique: Dict[Path, Path] = {}
        try:
            candidates = path.rglob("*") if self.config.recursive else path.iterdir()
            for candidate in candidates:
                if candidate.suffix.lower() in ICS_EXTENSIONS and candidate.is_file():
                    unique.setdefault(candidate.resolve(), candidate)
        except OSError as e:
            raise SourceReadError(f"Cannot list {path}: {e}", self.config.name) from e

        files = sorted(unique.values())
        logger.debug(f"Resolved {len(files)} calendar files for {self.label}")
        return files

    def parse_file(self, file_path: Path) -> ICSParseResult:
        """Parse one file of this source.

        Raises:
            SourceReadError: If the file cannot be read
        """
        try:
            return self.parser.parse_file(file_path)
        except ICSError as e:
            raise SourceReadError(f"Skipping {file_path}: {e.message}", self.config.name) from e

    def load(self) -> SourceLoadResult:
        """Load and annotate every record of this source.

        Problems never propagate: an unresolvable path or unreadable file
        becomes a warning and the remaining files are still read.
        """
        result = SourceLoadResult()

        try:
            files = self.resolve_files()
        except SourceError as e:
            self._warn(result, e.message)
            return result

        for file_path in files:
            try:
                parsed = self.parse_file(file_path)
            except SourceError as e:
                self._warn(result, e.message)
                continue

            calendar_name = self.config.name or parsed.calendar_name or DEFAULT_CALENDAR_NAME
            for record in [*parsed.events, *parsed.tasks]:
                record.calendar = calendar_name
                record.color = self.config.color
                record.source_file = str(file_path)

            result.events.extend(parsed.events)
            result.tasks.extend(parsed.tasks)
            result.files_parsed += 1
            for warning in parsed.warnings:
                self._warn(result, f"{file_path.name}: {warning}")

        logger.debug(
            f"Loaded {len(result.events)} events and {len(result.tasks)} tasks "
            f"from {result.files_parsed} files for {self.label}"
        )
        return result

    def _warn(self, result: SourceLoadResult, message: str) -> None:
        logger.warning(f"[{self.label}] {message}")
        result.warnings.append(message)


def parse_source(
    path: Union[str, Path], recursive: bool = False
) -> Tuple[List[CalendarEvent], List[CalendarTask]]:
    """Parse a calendar file or directory.

    Args:
        path: File or directory path
        recursive: Scan subdirectories when ``path`` is a directory

    Returns:
        Tuple of (events, tasks); missing paths yield empty lists
    """
    handler = ICSFileSourceHandler(SourceConfig(path=str(path), recursive=recursive))
    result = handler.load()
    return result.events, result.tasks
