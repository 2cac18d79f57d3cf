"""Shared pytest fixtures."""

from pathlib import Path

import pytest
from PIL import Image

from icon_request.models.app import AppRecord
from icon_request.models.config import RequestConfig


class SolidIcon:
    """Renders a plain colored square, standing in for a platform icon."""

    def __init__(self, color: str = "red", size: int = 48) -> None:
        self.color = color
        self.size = size
        self.calls = 0

    def render(self, app: AppRecord) -> Image.Image:
        self.calls += 1
        return Image.new("RGBA", (self.size, self.size), self.color)


class NoIcon:
    """An app whose icon resource cannot be rasterized."""

    def render(self, app: AppRecord) -> None:
        return None


class BrokenIcon:
    def render(self, app: AppRecord) -> Image.Image:
        raise RuntimeError("icon resource is corrupt")


@pytest.fixture
def camera_app() -> AppRecord:
    return AppRecord(name="Camera", pkg="com.cam", code="com.cam/.Main", icon=SolidIcon())


@pytest.fixture
def apps(camera_app: AppRecord) -> list[AppRecord]:
    return [
        camera_app,
        AppRecord(
            name="Google Maps",
            pkg="com.google.android.apps.maps",
            code="com.google.android.apps.maps/com.google.android.maps.MapsActivity",
            icon=SolidIcon("blue"),
        ),
        AppRecord(name="Calculator", pkg="com.calc", code="com.calc/.Calc", icon=SolidIcon("green")),
    ]


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "requests"


@pytest.fixture
def share_config(cache_dir: Path) -> RequestConfig:
    return RequestConfig(
        email_recipient="designer@example.com",
        cache_folder=cache_dir,
        email_subject="Icon Request",
        include_device_info=False,
    )


@pytest.fixture
def remote_config(cache_dir: Path) -> RequestConfig:
    return RequestConfig(
        api_key="secret-token",
        api_host="https://requests.example.com/v1/request",
        cache_folder=cache_dir,
    )
