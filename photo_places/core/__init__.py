"""Configuration and error types shared across services."""
