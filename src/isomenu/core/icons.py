"""Icon resolution with a load-once cache.

Menu items reference icons by key. The whole icon set is loaded on first
use and shared by every caller; a failed load is forgotten so the next
call retries. Resolution never raises: unknown keys and failed loads
degrade to a fallback glyph.
"""

import asyncio
import html
import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

FALLBACK_PATH = "M12 4.354a4 4 0 110 5.292M15 21H3v-1a6 6 0 016-6h6v6z"

_SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" class="{class_name}" fill="none" '
    'viewBox="0 0 24 24" stroke="currentColor" stroke-width="1.5" aria-hidden="true">'
    '<path stroke-linecap="round" stroke-linejoin="round" d="{path}"/></svg>'
)


@dataclass(frozen=True)
class Icon:
    """Resolved icon."""

    key: str
    path: str
    fallback: bool = False

    def to_svg(self, class_name: str = "h-6 w-6") -> str:
        """Render the icon as an inline SVG element."""
        return _SVG_TEMPLATE.format(
            class_name=html.escape(class_name, quote=True),
            path=html.escape(self.path, quote=True),
        )


def load_icon_paths(path: Path) -> dict[str, str]:
    """Read an icon set mapping keys to SVG path data.

    Args:
        path: Path to JSON file with a ``{"key": "path data"}`` object

    Returns:
        Mapping of icon key to SVG path data

    Raises:
        OSError: If the file can't be read
        ValueError: If the file is not a JSON object of strings
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Icon set must be a JSON object: {path}")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ValueError(f"Icon {key!r} must map to a string in {path}")
    return data


class IconCache:
    """Process-wide icon set cache.

    The first caller starts a single load, concurrent callers await the
    same task and later callers reuse its result.
    """

    def __init__(self, icons_file: Path) -> None:
        """Initialize cache.

        Args:
            icons_file: JSON icon set to load on first use
        """
        self._icons_file = icons_file
        self._icons: dict[str, str] | None = None
        self._pending: asyncio.Task[dict[str, str]] | None = None

    @property
    def icons_file(self) -> Path:
        return self._icons_file

    @property
    def loaded(self) -> bool:
        return self._icons is not None

    async def get_icons(self) -> dict[str, str] | None:
        """Return the icon set, loading it on first use.

        Returns:
            Icon mapping, or None when loading failed
        """
        if self._icons is not None:
            return self._icons

        if self._pending is None:
            self._pending = asyncio.create_task(
                asyncio.to_thread(load_icon_paths, self._icons_file)
            )
            self._pending.add_done_callback(self._on_load_done)
        pending = self._pending

        try:
            icons = await asyncio.shield(pending)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load icons from {self._icons_file}: {e}")
            if self._pending is pending:
                self._pending = None
            return None

        if self._icons is None:
            logger.info(f"Loaded {len(icons)} icons from {self._icons_file}")
            self._icons = icons
        return self._icons

    async def resolve(self, key: str) -> Icon:
        """Resolve an icon key, falling back to a default glyph."""
        icons = await self.get_icons()
        path = icons.get(key) if icons is not None else None
        if path is None:
            if icons is not None:
                logger.warning(f"Unknown icon {key!r}, using fallback")
            return Icon(key=key, path=FALLBACK_PATH, fallback=True)
        return Icon(key=key, path=path)

    def _on_load_done(self, task: asyncio.Task[dict[str, str]]) -> None:
        # Waiters may all be cancelled; the failure must still be retrieved
        if task.cancelled() or task.exception() is not None:
            if self._pending is task:
                self._pending = None

    def clear(self) -> None:
        """Drop the loaded icon set so the next call reloads it."""
        self._icons = None
        self._pending = None
