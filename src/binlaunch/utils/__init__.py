"""Transport, extraction and process helpers."""
