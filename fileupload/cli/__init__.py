"""Command line interface for fileupload."""
