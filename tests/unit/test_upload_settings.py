"""Tests for upload settings."""
import stat
from unittest.mock import Mock

import pytest

from fileupload.core.config import UNLIMITED, UploadEnvironment
from fileupload.core.exceptions import ErrorKind, UploadError, UploadValidationError
from fileupload.core.path import Directory, File
from fileupload.core.upload.settings import UploadSettings, write_target_file


class TestUploadSettingsLimits:
    """Test suite for size limits."""
    
    def test_individual_limit_starts_at_ceiling(self):
        settings = UploadSettings(UploadEnvironment.default())
        
        assert settings.max_total_size == 2 * 1024 ** 2
        assert settings.maximum_size_in_bytes == settings.max_total_size
    
    def test_unlimited_ceiling(self, environment):
        assert UploadSettings(environment).maximum_size_in_bytes == UNLIMITED
    
    def test_lowering_succeeds(self):
        settings = UploadSettings(UploadEnvironment.default())
        
        result = settings.with_maximum_size_in_bytes(1000)
        
        assert result is settings
        assert settings.maximum_size_in_bytes == 1000
    
    def test_raising_above_ceiling_fails_immediately(self):
        """Test exceeding the environment ceiling raises at call time."""
        settings = UploadSettings(UploadEnvironment.default())
        
        with pytest.raises(UploadError) as exc_info:
            settings.with_maximum_size_in_megabytes(3)
        
        assert exc_info.value.kind is ErrorKind.TOTAL_SIZE_EXCEEDED
        assert settings.maximum_size_in_bytes == 2 * 1024 ** 2
    
    def test_limit_equal_to_ceiling_allowed(self):
        settings = UploadSettings(UploadEnvironment.default())
        
        settings.with_maximum_size_in_megabytes(2)
        
        assert settings.maximum_size_in_megabytes == 2
    
    def test_scaled_setters(self, environment):
        settings = UploadSettings(environment)
        
        assert settings.with_maximum_size_in_kilobytes(3).maximum_size_in_bytes == 3 * 1024
        assert settings.with_maximum_size_in_megabytes(3).maximum_size_in_bytes == 3 * 1024 ** 2
        assert settings.with_maximum_size_in_gigabytes(3).maximum_size_in_bytes == 3 * 1024 ** 3
    
    @pytest.mark.parametrize("size", [0, 1, 1023, 1024, 1025, 5 * 1024 ** 2 + 17, 3 * 1024 ** 3 - 1])
    def test_scaled_getters_floor(self, environment, size):
        """Test scaled getters agree with the byte value."""
        settings = UploadSettings(environment).with_maximum_size_in_bytes(size)
        
        assert settings.maximum_size_in_kilobytes == size // 1024
        assert settings.maximum_size_in_megabytes == size // 1024 ** 2
        assert settings.maximum_size_in_gigabytes == size // 1024 ** 3
    
    def test_getters_are_idempotent(self, settings):
        settings.with_maximum_size_in_kilobytes(10).with_target_filename("name")
        
        first = (settings.maximum_size_in_bytes, settings.target_directory, settings.target_filename)
        second = (settings.maximum_size_in_bytes, settings.target_directory, settings.target_filename)
        
        assert first == second
    
    def test_disabled_environment_fails_construction(self):
        with pytest.raises(UploadError) as exc_info:
            UploadSettings(UploadEnvironment(file_uploads="0"))
        
        assert exc_info.value.kind is ErrorKind.UPLOADS_DISABLED
    
    def test_no_uploads_allowed_fails_construction(self):
        with pytest.raises(UploadError) as exc_info:
            UploadSettings(UploadEnvironment(max_file_uploads="0"))
        
        assert exc_info.value.kind is ErrorKind.NO_UPLOADS_ALLOWED


class TestUploadSettingsTarget:
    """Test suite for target directory and filename."""
    
    def test_defaults(self, environment):
        settings = UploadSettings(environment)
        
        assert settings.target_directory is None
        assert settings.target_filename is None
    
    def test_target_directory(self, environment):
        settings = UploadSettings(environment).with_target_directory("/srv/uploads/")
        
        assert settings.target_directory == "/srv/uploads"
    
    def test_target_filename_trimmed(self, environment):
        settings = UploadSettings(environment).with_target_filename("  avatar ")
        
        assert settings.target_filename == "avatar"


class TestDescribeTargetFile:
    """Test suite for describe_target_file."""
    
    def test_requires_directory(self, environment):
        settings = UploadSettings(environment)
        
        with pytest.raises(UploadError) as exc_info:
            settings.describe_target_file("txt")
        
        assert exc_info.value.kind is ErrorKind.TARGET_DIRECTORY_NOT_SPECIFIED
    
    def test_uses_target_filename(self, settings, target_dir):
        file = settings.with_target_filename("avatar").describe_target_file("png")
        
        assert isinstance(file, File)
        assert file.filename == "avatar"
        assert file.extension == "png"
        assert file.path == f"{target_dir}/avatar.png"
    
    def test_random_filename(self, environment, target_dir):
        """Test generated names are 64 hex characters from 32 random bytes."""
        random_source = Mock(return_value=b"\xab" * 32)
        settings = UploadSettings(environment, random_source=random_source).with_target_directory(target_dir)
        
        file = settings.describe_target_file("bin")
        
        random_source.assert_called_once_with(32)
        assert file.filename == "ab" * 32
    
    def test_fixed_random_source(self, environment, target_dir, fixed_random):
        settings = UploadSettings(environment, random_source=fixed_random).with_target_directory(target_dir)
        
        assert settings.describe_target_file("txt").filename == bytes(range(32)).hex()
    
    def test_default_random_source(self, settings):
        """Test default names are unique hex strings."""
        first = settings.describe_target_file(None).filename
        second = settings.describe_target_file(None).filename
        
        assert len(first) == 64
        int(first, 16)
        assert first != second
    
    def test_invalid_filename(self, settings):
        with pytest.raises(UploadValidationError) as exc_info:
            settings.with_target_filename("../etc/passwd").describe_target_file("txt")
        
        assert exc_info.value.kind is ErrorKind.INVALID_FILENAME
    
    def test_empty_filename_invalid(self, settings):
        with pytest.raises(UploadValidationError) as exc_info:
            settings.with_target_filename("   ").describe_target_file("txt")
        
        assert exc_info.value.kind is ErrorKind.INVALID_FILENAME
    
    def test_creates_missing_directories(self, environment, tmp_path):
        """Test nested target directories are created with mode 0755."""
        target = tmp_path / "a" / "b"
        settings = UploadSettings(environment).with_target_directory(target)
        
        settings.describe_target_file("txt")
        
        assert target.is_dir()
        assert stat.S_IMODE(target.stat().st_mode) == 0o755
        assert stat.S_IMODE((tmp_path / "a").stat().st_mode) == 0o755
    
    def test_writes_no_bytes(self, settings):
        file = settings.describe_target_file("txt")
        
        assert not file.exists()
    
    def test_directory_creation_failure(self, environment, tmp_path):
        (tmp_path / "blocked").write_text("x")
        settings = UploadSettings(environment).with_target_directory(tmp_path / "blocked")
        
        with pytest.raises(UploadError) as exc_info:
            settings.describe_target_file("txt")
        
        assert exc_info.value.kind is ErrorKind.TARGET_FILE_WRITE_ERROR


class TestWriteTargetFile:
    """Test suite for write_target_file."""
    
    def test_writes_bytes(self, tmp_path):
        file = File(Directory(tmp_path), "out", "bin")
        
        result = write_target_file(file, b"\x00\x01\x02")
        
        assert result is file
        assert (tmp_path / "out.bin").read_bytes() == b"\x00\x01\x02"
    
    def test_write_failure(self, tmp_path):
        (tmp_path / "taken.bin").mkdir()
        file = File(Directory(tmp_path), "taken", "bin")
        
        with pytest.raises(UploadError) as exc_info:
            write_target_file(file, b"data")
        
        assert exc_info.value.kind is ErrorKind.TARGET_FILE_WRITE_ERROR
