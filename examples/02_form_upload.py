"""
Validate files received from a multipart form
"""
from fileupload import (
    FileUpload,
    MemoryUploadRegistry,
    UploadEnvironment,
    UploadError,
    UploadSettings,
    UploadValidationError,
    setup_logging,
)


def main():
    setup_logging()
    
    # Limits come from FILEUPLOAD_* variables, e.g. FILEUPLOAD_UPLOAD_MAX_FILESIZE=10M
    environment = UploadEnvironment.from_environ()
    print(f"Ceiling: {environment.maximum_upload_size} bytes")
    
    # The receiving server fills the registry while parsing the request
    registry = MemoryUploadRegistry()
    registry.register_bytes("avatar", b"\x89PNG\r\n\x1a\n", "me.png")
    registry.register_bytes("resume", b"MZ\x90\x00", "resume.exe")
    
    try:
        for input_name in ("avatar", "resume"):
            settings = UploadSettings(environment).with_target_directory("uploads/users/42")
            upload = FileUpload(registry, settings).with_allowed_extensions(["png", "jpg", "pdf"])
            try:
                stored = upload.from_input(input_name).save()
                print(f"{input_name}: stored as {stored.filename_with_extension}")
            except UploadValidationError as e:
                print(f"{input_name}: rejected ({e.code}), allowed: {upload.allowed_extensions_human_string(' or ')}")
    except UploadError as e:
        print(f"Server misconfigured: {e.message}")
    finally:
        registry.cleanup()


if __name__ == "__main__":
    main()
