"""Utility modules for the news aggregation system."""

from src.utils.url_validator import LinkValidator, ValidationResult, validate_url

__all__ = ["LinkValidator", "ValidationResult", "validate_url"]
