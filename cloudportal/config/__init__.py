"""Configuration module for the Cloudportal provider."""
from .settings import ProviderConfig, load_provider_file, load_settings

__all__ = ["ProviderConfig", "load_provider_file", "load_settings"]
