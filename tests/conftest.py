"""Shared test fixtures."""

from pathlib import Path

import pytest
from isomenu.config import (
    Config,
    IconsConfig,
    MenuConfig,
    NavigationConfig,
    ServerConfig,
    SessionsConfig,
)
from isomenu.core.menu import Divider, MenuNode, load_menu
from isomenu.core.types import Role
from isomenu.resources import default_icons_path, default_menu_path

from tests.menu_builders import make_item


@pytest.fixture
def reference_menu() -> tuple[MenuNode, ...]:
    """Bundled DocManager ISO menu."""
    return load_menu(default_menu_path())


@pytest.fixture
def deep_menu() -> tuple[MenuNode, ...]:
    """Three-level menu with mixed role requirements."""
    return (
        make_item("Trang chủ", "home"),
        Divider(label="Nghiệp vụ"),
        make_item(
            "Đào tạo",
            "training",
            make_item("Kế hoạch đào tạo", "training-plans"),
            make_item(
                "Hồ sơ",
                "training-records",
                make_item("Chứng chỉ", "training-certificates"),
                make_item("Đánh giá sau đào tạo", "training-reviews", roles=("manager",)),
            ),
        ),
        Divider(label="Quản trị", required_roles=frozenset({Role("admin")})),
        make_item(
            "Nhân sự",
            "personnel",
            make_item("Phòng ban", "departments"),
            make_item("Chức vụ", "positions", roles=("admin",)),
            roles=("admin", "manager"),
        ),
        make_item("Cài đặt", "settings", roles=("admin",), badge="2"),
    )


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration using the bundled menu and icon set."""
    return Config(
        server=ServerConfig(),
        menu=MenuConfig(file=default_menu_path(), home_route="dashboard"),
        icons=IconsConfig(file=default_icons_path()),
        navigation=NavigationConfig(),
        sessions=SessionsConfig(),
        config_path=tmp_path / "isomenu.toml",
    )
