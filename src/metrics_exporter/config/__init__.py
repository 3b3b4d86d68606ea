"""Pacote config: defaults e overrides via .env / ambiente."""

from .settings import DEFAULT_SETTINGS, load_settings, validate_settings

__all__ = ["DEFAULT_SETTINGS", "load_settings", "validate_settings"]
