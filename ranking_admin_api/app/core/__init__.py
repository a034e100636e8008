"""Configuration, logging, storage bootstrap and error types."""
