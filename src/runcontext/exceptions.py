"""Custom exceptions for runcontext."""


class RunContextError(Exception):
    """Base exception for all runcontext errors."""
    pass


class ConfigError(RunContextError):
    """Raised when the runcontext configuration file is malformed."""
    pass


class ProviderRegistrationError(RunContextError):
    """Raised when a config provider is registered twice or is not registered."""
    pass


class ProviderInstantiationError(RunContextError):
    """Raised when a registered config provider cannot be built."""
    pass


class NotInDatabricksNotebookError(RunContextError, RuntimeError):
    """Raised when a notebook accessor is called outside a Databricks notebook.

    This signals a caller bug and is never handled inside the package.
    """
    pass
