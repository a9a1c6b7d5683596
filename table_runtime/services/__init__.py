"""File-level services used by the CLI: validation, conversion, progress, summary."""
