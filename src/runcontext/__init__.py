"""runcontext: environment context for ML experiment tracking.

Detects whether the process runs inside a Databricks notebook and derives
the run tags (notebook id, notebook path, webapp URL) that describe it.

Example:
    >>> from runcontext import DatabricksContext, register_provider
    >>>
    >>> register_provider(
    ...     "com.databricks.config.DatabricksClientSettingsProvider",
    ...     "my_pkg.settings:ClientSettings",
    ... )
    >>> context = DatabricksContext.create_if_available()
    >>> tags = context.get_tags() if context else {}
"""

from .databricks import CONFIG_PROVIDER_NAME, DatabricksContext
from .exceptions import (
    ConfigError,
    NotInDatabricksNotebookError,
    ProviderInstantiationError,
    ProviderRegistrationError,
    RunContextError,
)
from .providers import (
    ConfigProvider,
    DictConfigProvider,
    ProviderLookup,
    ProviderRegistry,
    get_registry,
    register_provider,
    reset_registry,
)

__version__ = "0.1.0"

__all__ = [
    # Context
    "CONFIG_PROVIDER_NAME",
    "DatabricksContext",
    # Providers
    "ConfigProvider",
    "DictConfigProvider",
    "ProviderLookup",
    "ProviderRegistry",
    "get_registry",
    "register_provider",
    "reset_registry",
    # Exceptions
    "RunContextError",
    "ConfigError",
    "NotInDatabricksNotebookError",
    "ProviderInstantiationError",
    "ProviderRegistrationError",
]
