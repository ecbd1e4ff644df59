"""Tests for Base64Upload."""
import base64
import os

import pytest

from fileupload.core.exceptions import ErrorKind, UploadError, UploadValidationError
from fileupload.core.upload.settings import UploadSettings
from fileupload.core.upload.strategies.base64_upload import DEFAULT_EXTENSION, Base64Upload, decode_strict


class TestDecodeStrict:
    """Test suite for decode_strict."""
    
    @pytest.mark.parametrize("text,expected", [
        ("aGVsbG8=", b"hello"),
        ("aGVsbG8", b"hello"),
        ("aGVs\nbG8=\n", b"hello"),
        (" aGVs bG8= ", b"hello"),
        ("aGVs\tbG8=\r\n", b"hello"),
        ("aGk=", b"hi"),
        ("aGk", b"hi"),
        ("", b""),
    ])
    def test_valid(self, text, expected):
        assert decode_strict(text) == expected
    
    @pytest.mark.parametrize("text", [
        "aGVsbG8*",
        "aGVsb",
        "a",
        "aGVsbG8=aGVs",
        "aGVs-bG8",
        "aG=",
        "aGVsbG8==",
        "aGVsbG=",
        "aGVs\vbG8=",
        "aGVs\fbG8=",
    ])
    def test_invalid(self, text):
        assert decode_strict(text) is None


class TestBase64Upload:
    """Test suite for Base64Upload."""
    
    def test_round_trip(self, settings, target_dir):
        """Test random data is stored byte for byte."""
        data = os.urandom(4096)
        
        stored = Base64Upload(settings).with_data(base64.b64encode(data).decode()).save()
        
        assert (target_dir / stored.filename_with_extension).read_bytes() == data
    
    def test_default_extension(self, settings):
        stored = Base64Upload(settings).with_data("aGVsbG8=").save()
        
        assert DEFAULT_EXTENSION == "bin"
        assert stored.extension == "bin"
        assert stored.filename_with_extension.endswith(".bin")
    
    def test_custom_extension_and_filename(self, settings, target_dir):
        settings.with_target_filename("greeting")
        upload = Base64Upload(settings).with_filename_extension("txt").with_data("aGVsbG8=")
        
        stored = upload.save()
        
        assert stored.path == f"{target_dir}/greeting.txt"
        assert (target_dir / "greeting.txt").read_bytes() == b"hello"
    
    def test_getters(self, settings):
        upload = Base64Upload(settings)
        
        assert upload.data is None
        assert upload.filename_extension is None
        
        upload.with_data("aGk=").with_filename_extension(" png ")
        
        assert upload.data == "aGk="
        assert upload.filename_extension == "png"
        assert upload.settings is settings
    
    def test_data_not_specified(self, settings):
        with pytest.raises(UploadValidationError) as exc_info:
            Base64Upload(settings).save()
        
        assert exc_info.value.kind is ErrorKind.INPUT_NOT_SPECIFIED
    
    @pytest.mark.parametrize("data", ["", "not base64!", "====", "\n", "aG="])
    def test_input_not_found(self, settings, target_dir, data):
        with pytest.raises(UploadValidationError) as exc_info:
            Base64Upload(settings).with_data(data).save()
        
        assert exc_info.value.kind is ErrorKind.INPUT_NOT_FOUND
        assert not target_dir.exists()
    
    def test_too_large(self, settings, target_dir):
        settings.with_maximum_size_in_bytes(4)
        
        with pytest.raises(UploadValidationError) as exc_info:
            Base64Upload(settings).with_data("aGVsbG8=").save()
        
        assert exc_info.value.kind is ErrorKind.FILE_TOO_LARGE
        assert not target_dir.exists()
    
    def test_size_equal_to_limit_accepted(self, settings):
        settings.with_maximum_size_in_bytes(5)
        
        assert Base64Upload(settings).with_data("aGVsbG8=").save().exists()
    
    def test_missing_target_directory(self, environment):
        upload = Base64Upload(UploadSettings(environment)).with_data("aGVsbG8=")
        
        with pytest.raises(UploadError) as exc_info:
            upload.save()
        
        assert exc_info.value.kind is ErrorKind.TARGET_DIRECTORY_NOT_SPECIFIED
    
    def test_invalid_filename(self, settings):
        settings.with_target_filename("what?")
        
        with pytest.raises(UploadValidationError) as exc_info:
            Base64Upload(settings).with_data("aGVsbG8=").save()
        
        assert exc_info.value.kind is ErrorKind.INVALID_FILENAME
