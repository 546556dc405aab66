"""Exceptions raised by the dashboard backend."""


class DashboardError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(DashboardError):
    """A required setting (credential, data source) is missing or invalid."""


class AssistantError(DashboardError):
    """The text-generation gateway failed or returned no usable text."""
