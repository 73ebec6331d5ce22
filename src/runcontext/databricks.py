"""Detection of Databricks notebooks and the run tags derived from them."""

import logging
from typing import Dict, Optional

from .exceptions import NotInDatabricksNotebookError
from .providers import ConfigProvider, ProviderRegistry, get_registry
from .tags import (
    MLFLOW_DATABRICKS_NOTEBOOK_ID,
    MLFLOW_DATABRICKS_NOTEBOOK_PATH,
    MLFLOW_DATABRICKS_WEBAPP_URL,
    MLFLOW_SOURCE_NAME,
    MLFLOW_SOURCE_TYPE,
    NOTEBOOK_SOURCE_TYPE,
)

CONFIG_PROVIDER_NAME = "com.databricks.config.DatabricksClientSettingsProvider"
WORKSPACE_PREFIX = "/workspace"

logger = logging.getLogger(__name__)


class DatabricksContext:
    """
    Wraps the client settings a Databricks runtime exposes to the process.

    Build it with ``create_if_available()``; it returns None outside Databricks.

    Example:
        >>> context = DatabricksContext.create_if_available()
        >>> tags = context.get_tags() if context else {}
    """

    def __init__(self, config_provider: ConfigProvider):
        self._config_provider = config_provider

    @property
    def config_provider(self) -> ConfigProvider:
        return self._config_provider

    @classmethod
    def create_if_available(
        cls, registry: Optional[ProviderRegistry] = None
    ) -> Optional["DatabricksContext"]:
        """
        Create a context if a Databricks client settings provider is registered.

        Args:
            registry (Optional[ProviderRegistry]): Registry to look the provider up in.
              Defaults to the process-wide registry.

        Returns:
            Optional[DatabricksContext]: The context, or None if no provider is
              registered or the registered one could not be built.
        """
        registry = registry or get_registry()
        lookup = registry.lookup(CONFIG_PROVIDER_NAME)
        if lookup.error is not None:
            logger.warning(
                f"Found but failed to invoke config provider '{CONFIG_PROVIDER_NAME}': {lookup.error}",
                exc_info=lookup.error,
            )
            return None
        if lookup.provider is None:
            return None
        return cls(lookup.provider)

    def get_tags(self) -> Dict[str, str]:
        """
        Tags describing the current notebook, empty outside a Databricks notebook.
        """
        tags: Dict[str, str] = {}
        if not self.is_in_databricks_notebook():
            return tags

        notebook_id = self.get_notebook_id()
        if notebook_id is not None:
            tags[MLFLOW_DATABRICKS_NOTEBOOK_ID] = notebook_id

        notebook_path = self._get_notebook_path()
        if notebook_path is not None:
            tags[MLFLOW_SOURCE_NAME] = notebook_path
            tags[MLFLOW_DATABRICKS_NOTEBOOK_PATH] = notebook_path
            tags[MLFLOW_SOURCE_TYPE] = NOTEBOOK_SOURCE_TYPE

        webapp_url = self._get_webapp_url()
        if webapp_url is not None:
            tags[MLFLOW_DATABRICKS_WEBAPP_URL] = webapp_url
        return tags

    def is_in_databricks_notebook(self) -> bool:
        acl_path = self._config_provider.get("aclPathOfAclRoot")
        return isinstance(acl_path, str) and acl_path.startswith(WORKSPACE_PREFIX)

    def _check_in_notebook(self, accessor: str) -> None:
        if not self.is_in_databricks_notebook():
            raise NotInDatabricksNotebookError(
                f"{accessor}() should not be called when is_in_databricks_notebook() is False"
            )

    def get_notebook_id(self) -> Optional[str]:
        """
        Last segment of the notebook's ACL root path.

        Only valid inside a Databricks notebook.

        Raises:
            NotInDatabricksNotebookError: If is_in_databricks_notebook() is False.
        """
        self._check_in_notebook("get_notebook_id")
        segments = self._config_provider.get("aclPathOfAclRoot").split("/")
        # trailing separators do not count as an id
        while segments and segments[-1] == "":
            segments.pop()
        if not segments:
            return None
        return segments[-1]

    def _get_notebook_path(self) -> Optional[str]:
        self._check_in_notebook("_get_notebook_path")
        return self._config_provider.get("notebookPath")

    def _get_webapp_url(self) -> Optional[str]:
        self._check_in_notebook("_get_webapp_url")
        return self._config_provider.get("host")
