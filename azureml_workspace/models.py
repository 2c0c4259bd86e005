# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

"""
Domain objects returned by the workspace client.

Every field has a default, so Dataset() and Datastore() are valid "empty"
values. The latest-version lookup relies on Dataset() (version 0) as the
placeholder for a dataset that has no versions.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

DATASTORE_PATH_PREFIX = "azureml://datastores/"
DATASTORE_PATH_PATTERN = re.compile(
    r"^azureml://datastores/([^/]+)/paths/(.*)$"
)


@dataclass
class SystemData:
    creation_date: Optional[datetime] = None
    creation_user_type: str = ""
    creation_user: str = ""
    last_modified_date: Optional[datetime] = None
    last_modified_user_type: str = ""
    last_modified_user: str = ""


@dataclass
class DatastoreAuth:
    credentials_type: str = ""
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    account_key: str = ""
    sql_user_name: str = ""
    sql_user_password: str = ""


@dataclass
class Datastore:
    id: str = ""
    name: str = ""
    is_default: bool = False
    description: str = ""
    storage_type: str = ""
    storage_account_name: str = ""
    storage_container_name: str = ""
    auth: Optional[DatastoreAuth] = None
    system_data: Optional[SystemData] = None


@dataclass(frozen=True)
class DatastorePath:
    """A file or directory inside a datastore."""

    datastore_name: str
    path: str

    def __str__(self) -> str:
        return (
            f"{DATASTORE_PATH_PREFIX}{self.datastore_name}"
            f"/paths/{self.path.lstrip('/')}"
        )

    @classmethod
    def parse(cls, uri: str) -> "DatastorePath":
        """Build a DatastorePath from an azureml://datastores/... URI."""
        match = DATASTORE_PATH_PATTERN.match(uri or "")
        if match is None:
            raise ValueError(f"Malformed datastore path: '{uri}'")
        return cls(datastore_name=match.group(1), path=match.group(2))


@dataclass
class Dataset:
    id: str = ""
    name: str = ""
    description: str = ""
    datastore_id: str = ""
    version: int = 0
    file_paths: List[DatastorePath] = field(default_factory=list)
    directory_paths: List[DatastorePath] = field(default_factory=list)
    system_data: Optional[SystemData] = None
