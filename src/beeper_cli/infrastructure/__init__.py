"""Infrastructure layer — HTTP transport and on-disk update cache."""
