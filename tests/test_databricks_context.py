"""Tests for DatabricksContext detection and tag derivation."""

import logging

import pytest

from runcontext import (
    CONFIG_PROVIDER_NAME,
    ConfigError,
    DatabricksContext,
    DictConfigProvider,
    NotInDatabricksNotebookError,
    ProviderRegistry,
    register_provider,
)
from runcontext.tags import (
    MLFLOW_DATABRICKS_NOTEBOOK_ID,
    MLFLOW_DATABRICKS_NOTEBOOK_PATH,
    MLFLOW_DATABRICKS_WEBAPP_URL,
    MLFLOW_SOURCE_NAME,
    MLFLOW_SOURCE_TYPE,
)


def make_context(**values):
    return DatabricksContext(DictConfigProvider(values))


@pytest.fixture
def registry():
    return ProviderRegistry()


def test_create_if_available_without_provider(registry):
    assert DatabricksContext.create_if_available(registry) is None


def test_create_if_available_uses_default_registry():
    register_provider(
        CONFIG_PROVIDER_NAME, lambda: DictConfigProvider({"aclPathOfAclRoot": "/workspace/7"})
    )
    context = DatabricksContext.create_if_available()
    assert context is not None
    assert context.get_notebook_id() == "7"


def test_create_if_available_wraps_provider(registry):
    provider = DictConfigProvider({"aclPathOfAclRoot": "/workspace/abc/123456"})
    registry.register(CONFIG_PROVIDER_NAME, lambda: provider)

    context = DatabricksContext.create_if_available(registry)

    assert isinstance(context, DatabricksContext)
    assert context.config_provider is provider


def test_create_if_available_accepts_plain_dict(registry):
    registry.register(CONFIG_PROVIDER_NAME, lambda: {"aclPathOfAclRoot": "/workspace/1"})
    context = DatabricksContext.create_if_available(registry)
    assert context.is_in_databricks_notebook()


def test_create_if_available_swallows_construction_failure(registry, caplog):
    def broken_provider():
        raise PermissionError("settings are not accessible")

    registry.register(CONFIG_PROVIDER_NAME, broken_provider)

    with caplog.at_level(logging.WARNING, logger="runcontext"):
        context = DatabricksContext.create_if_available(registry)

    assert context is None
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "settings are not accessible" in warnings[0].getMessage()


def test_create_if_available_ignores_uninstalled_module(registry, caplog):
    registry.register(CONFIG_PROVIDER_NAME, "com_databricks_not_installed:Settings")

    with caplog.at_level(logging.WARNING, logger="runcontext"):
        context = DatabricksContext.create_if_available(registry)

    assert context is None
    assert caplog.records == []


def test_create_if_available_warns_on_missing_attribute(registry, caplog):
    registry.register(CONFIG_PROVIDER_NAME, "collections:NoSuchSettings")

    with caplog.at_level(logging.WARNING, logger="runcontext"):
        context = DatabricksContext.create_if_available(registry)

    assert context is None
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_create_if_available_with_broken_config_file(tmp_path):
    (tmp_path / "runcontext.yaml").write_text("config_providers: [unclosed\n")
    with pytest.raises(ConfigError):
        DatabricksContext.create_if_available()


def test_create_if_available_rejects_non_provider(registry, caplog):
    registry.register(CONFIG_PROVIDER_NAME, lambda: 42)

    with caplog.at_level(logging.WARNING, logger="runcontext"):
        assert DatabricksContext.create_if_available(registry) is None
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_in_notebook_with_workspace_path():
    context = make_context(aclPathOfAclRoot="/workspace/abc/123456")
    assert context.is_in_databricks_notebook()
    assert context.get_notebook_id() == "123456"


@pytest.mark.parametrize("values", [{}, {"aclPathOfAclRoot": "/other/path"}])
def test_not_in_notebook(values):
    context = make_context(**values)
    assert not context.is_in_databricks_notebook()
    assert context.get_tags() == {}
    with pytest.raises(NotInDatabricksNotebookError):
        context.get_notebook_id()


@pytest.mark.parametrize("accessor", ["_get_notebook_path", "_get_webapp_url"])
def test_private_accessors_require_notebook(accessor):
    context = make_context(aclPathOfAclRoot="/other/path", notebookPath="/Users/me/nb")
    with pytest.raises(NotInDatabricksNotebookError):
        getattr(context, accessor)()


def test_get_tags_full():
    context = make_context(
        aclPathOfAclRoot="/workspace/x",
        notebookPath="/Users/me/nb",
        host="https://example.com",
    )
    assert context.get_tags() == {
        MLFLOW_DATABRICKS_NOTEBOOK_ID: "x",
        MLFLOW_SOURCE_NAME: "/Users/me/nb",
        MLFLOW_DATABRICKS_NOTEBOOK_PATH: "/Users/me/nb",
        MLFLOW_SOURCE_TYPE: "NOTEBOOK",
        MLFLOW_DATABRICKS_WEBAPP_URL: "https://example.com",
    }


def test_get_tags_only_notebook_id():
    context = make_context(aclPathOfAclRoot="/workspace/x")
    assert context.get_tags() == {MLFLOW_DATABRICKS_NOTEBOOK_ID: "x"}


def test_get_tags_returns_new_dict():
    context = make_context(aclPathOfAclRoot="/workspace/x")
    tags = context.get_tags()
    tags["extra"] = "value"
    assert context.get_tags() == {MLFLOW_DATABRICKS_NOTEBOOK_ID: "x"}


def test_notebook_id_ignores_trailing_separator():
    context = make_context(aclPathOfAclRoot="/workspace/abc/")
    assert context.get_notebook_id() == "abc"


def test_notebook_id_of_bare_workspace():
    context = make_context(aclPathOfAclRoot="/workspace")
    assert context.get_notebook_id() == "workspace"


@pytest.mark.parametrize("acl_path", [42, b"/workspace/x", ["/workspace/x"]])
def test_non_string_acl_path_is_not_a_notebook(acl_path):
    context = DatabricksContext({"aclPathOfAclRoot": acl_path})
    assert not context.is_in_databricks_notebook()
    assert context.get_tags() == {}
