"""Configuration and error types."""
