"""
Configuration management for the content API.

Contains the Pydantic settings shared by the HTTP app, the CLI and the
serverless entry point.
"""
from content_api.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
