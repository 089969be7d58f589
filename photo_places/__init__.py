"""Place-name lookup with a durable geocoding cache for photo pipelines."""

__version__ = "0.1.0"

__all__ = ["__version__"]
