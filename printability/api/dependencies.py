"""
Dependency injection for API routes.

These are set up during app initialization.
"""

from typing import Optional

from printability.validation import PdfValidator, ReadStrategy, ValidationSettings

# Global instances (set during app init)
_validator: Optional[PdfValidator] = None
_settings: Optional[ValidationSettings] = None
_strategy: ReadStrategy = ReadStrategy.IN_MEMORY


def init_dependencies(
    validator: PdfValidator,
    settings: ValidationSettings,
    strategy: ReadStrategy
):
    """Initialize global dependencies."""
    global _validator, _settings, _strategy
    _validator = validator
    _settings = settings
    _strategy = strategy


def get_validator() -> PdfValidator:
    """Get validator instance."""
    if _validator is None:
        raise RuntimeError("Validator not initialized")
    return _validator


def get_default_settings() -> ValidationSettings:
    """Get the validation settings used when a request does not override them."""
    if _settings is None:
        raise RuntimeError("Validation settings not initialized")
    return _settings


def get_default_strategy() -> ReadStrategy:
    return _strategy
