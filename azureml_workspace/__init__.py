# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

from azureml_workspace.config import Config
from azureml_workspace.models import (
    Dataset,
    Datastore,
    DatastoreAuth,
    DatastorePath,
    SystemData,
)
from azureml_workspace.operations.latest_versions import (
    CancellationToken,
    LatestVersionAggregator,
)
from azureml_workspace.shared.errors import (
    HttpResponseError,
    InvalidArgumentError,
    ResourceNotFoundError,
    WorkspaceError,
)
from azureml_workspace.shared.utils import select_latest
from azureml_workspace.workspace import Workspace

__all__ = [
    "CancellationToken",
    "Config",
    "Dataset",
    "Datastore",
    "DatastoreAuth",
    "DatastorePath",
    "HttpResponseError",
    "InvalidArgumentError",
    "LatestVersionAggregator",
    "ResourceNotFoundError",
    "SystemData",
    "Workspace",
    "WorkspaceError",
    "select_latest",
]
