"""
Store Base64 data and data URIs
"""
from fileupload import Base64Upload, DataUriUpload, UploadSettings, UploadValidationError


def new_settings() -> UploadSettings:
    # One settings object per upload
    return UploadSettings().with_maximum_size_in_kilobytes(512).with_target_directory("uploads")


def main():
    # Base64 with a custom extension
    stored = Base64Upload(new_settings()).with_data("aGVsbG8gd29ybGQ=").with_filename_extension("txt").save()
    print(f"Stored: {stored.path}")

    # Data URI, the extension comes from the MIME type
    upload = DataUriUpload(new_settings()).with_allowed_mime_types_and_extensions({
        "image/png": "png",
        "image/gif": "gif",
    })
    try:
        stored = upload.with_uri("data:image/jpeg;base64,/9j/4AAQ").save()
    except UploadValidationError as e:
        print(f"Rejected ({e.code}): only {upload.allowed_extensions_human_string(' or ')} allowed")

    # Fixed target name
    settings = new_settings().with_target_filename("greeting")
    stored = DataUriUpload(settings).with_uri("data:,Hello%2C%20World!").save()
    print(f"Stored: {stored.filename_with_extension}")


if __name__ == "__main__":
    main()
