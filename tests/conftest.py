import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from helpers import SampleData
from tiercache.infrastructure.cache.file_cache import FileCache
from tiercache.infrastructure.cli.display import ConsoleDisplay
from tiercache.infrastructure.config import settings
from tiercache.infrastructure.filesystem.temp_dirs import FixedDirectorySupplier


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    """Stands in for the platform temporary directory."""
    root = tmp_path / "tmp_root"
    root.mkdir()
    return root


@pytest.fixture
def make_cache(temp_root: Path):
    """Factory for FileCache[SampleData] instances rooted in temp_root."""
    def _make(**kwargs) -> FileCache:
        options = dict(
            cache_name="test_cache",
            from_json=SampleData.from_json,
            to_json=lambda d: d.to_json(),
            directory_supplier=FixedDirectorySupplier(temp_root),
        )
        options.update(kwargs)
        return FileCache(**options)
    return _make


@pytest.fixture
def cache(make_cache) -> FileCache:
    return make_cache()


@pytest.fixture
def cache_dir(temp_root: Path) -> Path:
    """Directory the default test cache writes its files to."""
    return temp_root / "file_cache" / "test_cache"


@pytest.fixture(autouse=True)
def isolated_config(temp_root: Path):
    """Keeps CLI runs away from the real temp dir and user configuration.

    CLI invocations reconfigure the package logger, so its handlers, level
    and propagation are restored afterwards as well.
    """
    package_logger = logging.getLogger("tiercache")
    saved = package_logger.handlers[:], package_logger.level, package_logger.propagate
    settings.clear_test_config()
    settings.set_config_for_testing({"cache.temp_root": str(temp_root)})
    yield
    settings.clear_test_config()
    settings.reset_configuration()
    package_logger.handlers[:], level, package_logger.propagate = saved
    package_logger.setLevel(level)


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('tiercache.main.ConsoleDisplay', return_value=mock)
    return mock
