"""Tests for AipiApp resolution and coverage dispatch."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
import pytest_asyncio

from aipi.app.app import AipiApp
from aipi.app.registry import AipiRegistry, BootstrapOptions
from aipi.app.resource import Covering, Resource
from aipi.core.errors import ResourceNotFoundError


class FileReader(Resource, Covering[str]):
    def __init__(self, mime_prefix: str) -> None:
        super().__init__()
        self.mime_prefix = mime_prefix

    def covers(self, item: str) -> bool:
        return item.startswith(self.mime_prefix)


class PlainReader(FileReader):
    """Registered under FileReader but never covers anything."""

    def __init__(self) -> None:
        super().__init__("")

    def covers(self, item: str) -> bool:
        return False


@pytest_asyncio.fixture
async def app_with_readers() -> tuple[AipiApp, FileReader, FileReader]:
    text = FileReader("text/")
    anything = FileReader("")
    registry = AipiRegistry().use(text, priority=90).use(anything, priority=10).use(PlainReader(), priority=50)
    app = await registry.bootstrap(BootstrapOptions())
    return app, text, anything


class TestCover:
    """Tests for cover / cover_all."""

    @pytest.mark.asyncio
    async def test_cover_picks_highest_priority(self, app_with_readers: tuple[AipiApp, FileReader, FileReader]) -> None:
        app, text, anything = app_with_readers
        assert app.cover("text/plain", FileReader) is text
        assert app.cover("image/png", FileReader) is anything

    @pytest.mark.asyncio
    async def test_cover_all_keeps_priority_order(
        self, app_with_readers: tuple[AipiApp, FileReader, FileReader]
    ) -> None:
        app, text, anything = app_with_readers
        assert app.cover_all("text/plain", FileReader) == [text, anything]
        assert app.cover_all("image/png", FileReader) == [anything]

    @pytest.mark.asyncio
    async def test_cover_none(self) -> None:
        app = await AipiRegistry().use(FileReader("text/")).bootstrap(BootstrapOptions())
        assert app.cover("image/png", FileReader) is None
        assert app.cover_all("image/png", FileReader) == []


class TestAppResolution:
    """Tests for get / require / get_all / mount."""

    @pytest.mark.asyncio
    async def test_get_and_require(self) -> None:
        reader = FileReader("text/")
        app = await AipiRegistry().use(reader).bootstrap(BootstrapOptions())

        assert app.get(FileReader) is reader
        assert app.require(FileReader) is reader
        assert app.get_all(FileReader) == [reader]

    @pytest.mark.asyncio
    async def test_require_missing(self) -> None:
        app = await AipiRegistry().bootstrap(BootstrapOptions())
        with pytest.raises(ResourceNotFoundError):
            app.require(FileReader)

    @pytest.mark.asyncio
    async def test_mount_without_registering(self) -> None:
        app = await AipiRegistry().bootstrap(BootstrapOptions())
        reader = await app.mount(FileReader("text/"))

        assert reader.mounted
        assert reader.app is app
        assert app.get(FileReader) is None


class TestAppLogging:
    """Tests for log / log_dev."""

    def test_log_dev_only_in_dev_mode(self) -> None:
        registry = AipiRegistry()
        quiet = AipiApp(registry, BootstrapOptions())
        loud = AipiApp(registry, BootstrapOptions(print_registry=True))

        with patch("aipi.app.app.logger", Mock()) as mock_logger:
            quiet.log_dev("hidden")
            loud.log_dev("shown", step=1)
            quiet.log("always")

        messages = [c.args[0] for c in mock_logger.info.call_args_list]
        assert messages == ["shown", "always"]
