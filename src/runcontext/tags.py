"""Tag names attached to tracking runs.

The vocabulary is owned by mlflow; this module only re-exports the names
runcontext produces.
"""

from mlflow.entities import SourceType
from mlflow.utils.mlflow_tags import (
    MLFLOW_DATABRICKS_NOTEBOOK_ID,
    MLFLOW_DATABRICKS_NOTEBOOK_PATH,
    MLFLOW_DATABRICKS_WEBAPP_URL,
    MLFLOW_SOURCE_NAME,
    MLFLOW_SOURCE_TYPE,
)

NOTEBOOK_SOURCE_TYPE = SourceType.to_string(SourceType.NOTEBOOK)

__all__ = [
    "MLFLOW_DATABRICKS_NOTEBOOK_ID",
    "MLFLOW_DATABRICKS_NOTEBOOK_PATH",
    "MLFLOW_DATABRICKS_WEBAPP_URL",
    "MLFLOW_SOURCE_NAME",
    "MLFLOW_SOURCE_TYPE",
    "NOTEBOOK_SOURCE_TYPE",
]
