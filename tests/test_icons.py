"""Tests for the icon cache."""

import asyncio
import gc
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from isomenu.core import icons as icons_module
from isomenu.core.icons import FALLBACK_PATH, Icon, IconCache, load_icon_paths


@pytest.fixture
def icons_file(tmp_path: Path) -> Path:
    """Write a two-icon set."""
    path = tmp_path / "icons.json"
    path.write_text(json.dumps({"home": "M1 1h2", "cog": "M3 3h4"}))
    return path


class TestLoadIconPaths:
    """Tests for load_icon_paths()."""

    def test__json_object__returns_mapping(self, icons_file: Path) -> None:
        """Load key to path mapping."""
        assert load_icon_paths(icons_file) == {"home": "M1 1h2", "cog": "M3 3h4"}

    def test__json_list__raises_error(self, tmp_path: Path) -> None:
        """Reject a non-object document."""
        path = tmp_path / "icons.json"
        path.write_text("[]")

        with pytest.raises(ValueError, match="must be a JSON object"):
            load_icon_paths(path)

    def test__non_string_value__raises_error(self, tmp_path: Path) -> None:
        """Reject icons without path data."""
        path = tmp_path / "icons.json"
        path.write_text('{"home": 1}')

        with pytest.raises(ValueError, match="'home' must map to a string"):
            load_icon_paths(path)


class TestIcon:
    """Tests for Icon.to_svg()."""

    def test__to_svg__embeds_path_and_class(self) -> None:
        """Render path data and CSS class."""
        svg = Icon(key="home", path="M1 1h2").to_svg("h-5 w-5")

        assert svg.startswith("<svg")
        assert 'class="h-5 w-5"' in svg
        assert 'd="M1 1h2"' in svg

    def test__to_svg__escapes_attributes(self) -> None:
        """Attribute values cannot break out of the element."""
        svg = Icon(key="x", path='M1"/><script>').to_svg('"><b')

        assert "<script>" not in svg
        assert "&quot;" in svg


class TestIconCache:
    """Tests for IconCache."""

    @pytest.mark.asyncio
    async def test__resolve__returns_known_icon(self, icons_file: Path) -> None:
        """Known keys resolve to their path data."""
        cache = IconCache(icons_file)

        icon = await cache.resolve("cog")

        assert icon == Icon(key="cog", path="M3 3h4")
        assert cache.loaded is True

    @pytest.mark.asyncio
    async def test__unknown_key__returns_fallback(self, icons_file: Path) -> None:
        """Unknown keys degrade to the fallback glyph."""
        cache = IconCache(icons_file)

        icon = await cache.resolve("nope")

        assert icon.fallback is True
        assert icon.path == FALLBACK_PATH

    @pytest.mark.asyncio
    async def test__missing_file__returns_fallback_without_raising(self, tmp_path: Path) -> None:
        """A failed load never propagates to the caller."""
        cache = IconCache(tmp_path / "missing.json")

        icon = await cache.resolve("home")

        assert icon.fallback is True
        assert cache.loaded is False

    @pytest.mark.asyncio
    async def test__failed_load__retries_on_next_call(self, tmp_path: Path) -> None:
        """A failed load is forgotten so a later call can succeed."""
        path = tmp_path / "icons.json"
        cache = IconCache(path)
        assert await cache.get_icons() is None

        path.write_text('{"home": "M1 1"}')

        assert await cache.get_icons() == {"home": "M1 1"}

    @pytest.mark.asyncio
    async def test__concurrent_callers__share_one_load(self, icons_file: Path) -> None:
        """Concurrent first calls read the file once."""
        cache = IconCache(icons_file)

        with patch.object(
            icons_module,
            "load_icon_paths",
            wraps=icons_module.load_icon_paths,
        ) as loader:
            results = await asyncio.gather(*(cache.resolve("home") for _ in range(5)))
            await cache.resolve("cog")

        assert loader.call_count == 1
        assert {icon.path for icon in results} == {"M1 1h2"}

    @pytest.mark.asyncio
    async def test__failed_load_without_waiters__is_retrieved_and_retried(
        self,
        tmp_path: Path,
    ) -> None:
        """A load that fails after its only caller was cancelled is not left dangling."""
        loop = asyncio.get_running_loop()
        errors: list[dict] = []
        loop.set_exception_handler(lambda _, context: errors.append(context))
        path = tmp_path / "icons.json"
        cache = IconCache(path)

        waiter = asyncio.create_task(cache.get_icons())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        for _ in range(200):
            if cache._pending is None:
                break
            await asyncio.sleep(0.01)
        gc.collect()

        assert cache._pending is None
        assert not [e for e in errors if "never retrieved" in e.get("message", "")]
        path.write_text('{"home": "M1 1"}')
        assert await cache.get_icons() == {"home": "M1 1"}
        loop.set_exception_handler(None)

    @pytest.mark.asyncio
    async def test__clear__reloads_on_next_call(self, icons_file: Path) -> None:
        """Clearing drops the cached set."""
        cache = IconCache(icons_file)
        await cache.get_icons()
        icons_file.write_text('{"home": "M9 9"}')

        cache.clear()

        assert cache.loaded is False
        assert (await cache.resolve("home")).path == "M9 9"
