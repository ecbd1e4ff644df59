"""Pytest fixtures for fileupload tests."""
import pytest

from fileupload import MemoryUploadRegistry, UploadEnvironment, UploadSettings


@pytest.fixture
def environment():
    """Environment without size ceiling."""
    return UploadEnvironment.unlimited()


@pytest.fixture
def target_dir(tmp_path):
    """Directory uploads are stored in (not created yet)."""
    return tmp_path / "uploads"


@pytest.fixture
def fixed_random():
    """Random source returning a known byte pattern."""
    return lambda n: bytes(range(n))


@pytest.fixture
def settings(environment, target_dir):
    """Settings with an unlimited environment and a target directory."""
    return UploadSettings(environment).with_target_directory(target_dir)


@pytest.fixture
def registry(tmp_path):
    """Upload registry whose temp files live inside tmp_path."""
    registry = MemoryUploadRegistry()
    yield registry
    registry.cleanup()


@pytest.fixture
def temp_dir(tmp_path):
    """Directory used as the receiving server's temp directory."""
    path = tmp_path / "tmp"
    path.mkdir()
    return path
