"""Shared test configuration and fixtures."""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest

from icalagenda.config.settings import AgendaSettings


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast isolated unit tests")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ICALAGENDA_* variables and logging handlers from leaking between tests."""
    for key in list(os.environ):
        if key.upper().startswith("ICALAGENDA_"):
            monkeypatch.delenv(key)

    yield

    package_logger = logging.getLogger("icalagenda")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def test_settings(tmp_path: Path) -> AgendaSettings:
    """Settings isolated from the user's config directory."""
    return AgendaSettings(config_dir=tmp_path / "config", data_dir=tmp_path / "data")


def _vevent(
    summary: str,
    dtstart: str,
    dtend: Optional[str] = None,
    uid: Optional[str] = None,
    **props: str,
) -> str:
    lines = [
        "BEGIN:VEVENT",
        f"UID:{uid or summary.lower().replace(' ', '-')}",
        f"SUMMARY:{summary}",
        dtstart if ":" in dtstart else f"DTSTART:{dtstart}",
    ]
    if dtend:
        lines.append(dtend if ":" in dtend else f"DTEND:{dtend}")
    for key, value in props.items():
        lines.append(f"{key.upper().replace('_', '-')}:{value}")
    lines.append("END:VEVENT")
    return "\r\n".join(lines)


def _vtodo(summary: str, uid: Optional[str] = None, **props: str) -> str:
    lines = ["BEGIN:VTODO", f"UID:{uid or summary.lower().replace(' ', '-')}", f"SUMMARY:{summary}"]
    for key, value in props.items():
        lines.append(f"{key.upper().replace('_', '-')}:{value}")
    lines.append("END:VTODO")
    return "\r\n".join(lines)


def _vcalendar(*components: str, name: Optional[str] = None) -> str:
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//icalagenda//tests//EN"]
    if name:
        lines.append(f"X-WR-CALNAME:{name}")
    lines.extend(component.strip("\r\n") for component in components)
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


@pytest.fixture
def ics_event() -> Callable[..., str]:
    """Build a VEVENT block; keyword arguments become extra properties."""
    return _vevent


@pytest.fixture
def ics_todo() -> Callable[..., str]:
    """Build a VTODO block; keyword arguments become extra properties."""
    return _vtodo


@pytest.fixture
def ics_calendar() -> Callable[..., str]:
    """Wrap component blocks in a VCALENDAR."""
    return _vcalendar


@pytest.fixture
def write_ics(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write calendar text below tmp_path and return the file path."""

    def _write(relative_path: str, content: str) -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def locked_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A directory whose listing fails with PermissionError."""
    locked = tmp_path / "locked"
    locked.mkdir()
    real_iterdir = Path.iterdir

    def _iterdir(self: Path) -> Iterator[Path]:
        if self == locked:
            raise PermissionError(13, "Permission denied", str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", _iterdir)
    return locked
