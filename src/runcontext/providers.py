"""Named registry of environment-supplied configuration providers.

A config provider is any object with a ``get(key)`` method returning a string
or ``None`` (every ``Mapping[str, str]`` qualifies). The host application
registers providers under well-known names at startup, either as a
zero-argument factory or as an import string ``"package.module:attribute"``
that is resolved only when the provider is looked up.
"""

import importlib
import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

from .config import load_runcontext_config
from .exceptions import ProviderInstantiationError, ProviderRegistrationError

logger = logging.getLogger(__name__)

ProviderFactory = Union[Callable[[], Any], str]


@runtime_checkable
class ConfigProvider(Protocol):
    """Read-only string key/value lookup."""

    def get(self, key: str) -> Optional[str]: ...


class DictConfigProvider:
    """Immutable config provider backed by a copy of a plain mapping."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def __repr__(self) -> str:
        return f"DictConfigProvider({dict(self._values)!r})"


@dataclass(frozen=True)
class ProviderLookup:
    """
    Result of looking up a provider by name.

    Attributes:
        name (str): The name that was looked up.
        found (bool): Whether anything is registered under the name.
        provider (Optional[ConfigProvider]): The instantiated provider, if it could be built.
        error (Optional[BaseException]): Why a registered provider could not be built.
    """

    name: str
    found: bool = False
    provider: Optional[ConfigProvider] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.provider is not None


def _split_import_string(target: str) -> Tuple[str, str]:
    if ":" in target:
        module_name, _, attr_path = target.partition(":")
    else:
        module_name, _, attr_path = target.rpartition(".")
    if not module_name or not attr_path:
        raise ImportError(f"Invalid import string '{target}'")
    return module_name, attr_path


def _is_missing_module(error: ModuleNotFoundError, target: str) -> bool:
    """True if ``error`` is about the module ``target`` names, not one it imports."""
    module_name, _ = _split_import_string(target)
    return error.name is not None and (
        module_name == error.name or module_name.startswith(f"{error.name}.")
    )


def import_from_string(target: str) -> Any:
    """
    Import an attribute given as ``"package.module:attribute"``.

    A plain dotted path (``"package.module.attribute"``) is also accepted.

    Raises:
        ImportError: If the module cannot be imported.
        AttributeError: If the module has no such attribute.
    """
    module_name, attr_path = _split_import_string(target)
    obj = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj


class ProviderRegistry:
    """
    Maps provider names to factories and builds providers on demand.
    """

    def __init__(self):
        self._factories: Dict[str, ProviderFactory] = {}

    def register(self, name: str, factory: ProviderFactory, overwrite: bool = False) -> None:
        """
        Register a provider factory.

        Args:
            name (str): Name the provider is looked up by.
            factory (ProviderFactory): Zero-argument callable, or an import string
              pointing at one.
            overwrite (bool): If True, replace an existing registration.

        Raises:
            ProviderRegistrationError: If the name is taken and overwrite is False,
              or the factory is neither callable nor a string.
        """
        if not (callable(factory) or isinstance(factory, str)):
            raise ProviderRegistrationError(
                f"Provider factory for '{name}' must be callable or an import string, "
                f"got {type(factory).__name__}"
            )
        if name in self._factories and not overwrite:
            raise ProviderRegistrationError(
                f"Provider '{name}' is already registered. Use overwrite=True to replace it."
            )
        self._factories[name] = factory
        logger.debug(f"Registered config provider '{name}'")

    def unregister(self, name: str) -> None:
        if name not in self._factories:
            raise ProviderRegistrationError(f"Provider '{name}' is not registered")
        del self._factories[name]
        logger.debug(f"Unregistered config provider '{name}'")

    def is_registered(self, name: str) -> bool:
        return name in self._factories

    def list_providers(self) -> List[str]:
        return list(self._factories)

    def lookup(self, name: str) -> ProviderLookup:
        """
        Build the provider registered under ``name``.

        Never raises for a missing or broken provider. A missing name, or an
        import string whose module is not installed, yields a lookup with
        ``found=False``. Any other failure while importing or calling the
        factory is returned in ``error``.

        Args:
            name (str): Name of the provider.

        Returns:
            ProviderLookup: The lookup result.
        """
        factory = self._factories.get(name)
        if factory is None:
            return ProviderLookup(name=name)

        try:
            if isinstance(factory, str):
                target = factory
                try:
                    factory = import_from_string(target)
                except ModuleNotFoundError as e:
                    if _is_missing_module(e, target):
                        logger.debug(f"Module for config provider '{name}' is not installed: {e}")
                        return ProviderLookup(name=name)
                    raise
            provider = factory()
        except Exception as e:
            return ProviderLookup(name=name, found=True, error=e)

        if not isinstance(provider, ConfigProvider):
            error = ProviderInstantiationError(
                f"Provider '{name}' built a {type(provider).__name__}, "
                f"which has no get(key) method"
            )
            return ProviderLookup(name=name, found=True, error=error)
        return ProviderLookup(name=name, found=True, provider=provider)


_default_registry: Optional[ProviderRegistry] = None
_default_registry_lock = threading.Lock()


def create_registry(config_path: Optional[str] = None) -> ProviderRegistry:
    """
    Create a ProviderRegistry populated from the ``config_providers`` section
    of the runcontext configuration.
    """
    registry = ProviderRegistry()
    config = load_runcontext_config(config_path)
    for name, target in config.get("config_providers", {}).items():
        registry.register(name, target)
    if registry.list_providers():
        logger.info(f"Loaded config providers from configuration: {registry.list_providers()}")
    return registry


def get_registry() -> ProviderRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = create_registry()
        return _default_registry


def reset_registry() -> None:
    """Drop the process-wide registry so the next get_registry() rebuilds it."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = None


def register_provider(name: str, factory: ProviderFactory, overwrite: bool = False) -> None:
    """Register a provider in the process-wide registry."""
    get_registry().register(name, factory, overwrite=overwrite)
