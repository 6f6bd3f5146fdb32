"""Configuration — layered resolver, persisted YAML store, logging setup."""
