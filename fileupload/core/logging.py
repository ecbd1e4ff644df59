"""Logger access for fileupload modules."""

import logging

# Level used until the application configures the root logger
UNCONFIGURED_LEVEL = logging.WARNING

LOGGER_NAMES = (
    'fileupload',
    'fileupload.config',
    'fileupload.path',
    'fileupload.upload',
    'fileupload.upload.registry',
    'fileupload.upload.field',
    'fileupload.upload.base64',
    'fileupload.upload.data_uri',
)


def get_logger(name: str) -> logging.Logger:
    """
    Return the named fileupload logger.

    Records always reach the root logger's handlers. Rejected uploads are
    logged at WARNING and stored files at INFO, so a module loaded before
    the application sets up logging stays quiet below WARNING.

    Args:
        name: One of LOGGER_NAMES

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    if not logging.getLogger().handlers:
        logger.setLevel(UNCONFIGURED_LEVEL)
    return logger
