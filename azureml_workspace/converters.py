# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

"""
Conversion between workspace API JSON documents and domain objects.
"""

import logging

from azureml_workspace.models import (
    DATASTORE_PATH_PREFIX,
    Dataset,
    Datastore,
    DatastoreAuth,
    DatastorePath,
    SystemData,
)
from azureml_workspace.shared.utils import get_path, parse_timestamp

DEFAULT_STORAGE_ENDPOINT = "core.windows.net"
DEFAULT_STORAGE_PROTOCOL = "https"

logger = logging.getLogger(__name__)


def to_system_data(document):
    return SystemData(
        creation_date=parse_timestamp(
            get_path(document, "systemData.createdAt")
        ),
        creation_user_type=get_path(document, "systemData.createdByType", ""),
        creation_user=get_path(document, "systemData.createdBy", ""),
        last_modified_date=parse_timestamp(
            get_path(document, "systemData.lastModifiedAt")
        ),
        last_modified_user_type=get_path(
            document, "systemData.lastModifiedByType", ""
        ),
        last_modified_user=get_path(
            document, "systemData.lastModifiedBy", ""
        ),
    )


def to_datastore(document):
    credentials = get_path(document, "properties.contents.credentials", {})
    auth = DatastoreAuth(
        credentials_type=get_path(credentials, "credentialsType", ""),
        tenant_id=get_path(credentials, "tenantId", ""),
        client_id=get_path(credentials, "clientId", ""),
        client_secret=get_path(credentials, "secrets.clientSecret", ""),
        account_key=get_path(credentials, "secrets.key", ""),
        sql_user_name=get_path(credentials, "userId", ""),
        sql_user_password=get_path(credentials, "secrets.password", ""),
    )
    return Datastore(
        id=get_path(document, "id", ""),
        name=get_path(document, "name", ""),
        description=get_path(document, "properties.description", ""),
        is_default=bool(get_path(document, "properties.isDefault", False)),
        storage_account_name=get_path(
            document, "properties.contents.accountName", ""
        ),
        storage_container_name=get_path(
            document, "properties.contents.containerName", ""
        ),
        storage_type=get_path(
            document, "properties.contents.contentsType", ""
        ),
        auth=auth,
        system_data=to_system_data(document),
    )


def to_datastore_list(document):
    return [to_datastore(item) for item in get_path(document, "value", [])]


def to_dataset_names(document):
    return [
        get_path(item, "name", "") for item in get_path(document, "value", [])
    ]


def to_dataset_paths(paths, path_type):
    """
    Extract the datastore paths of one type from a dataset "paths" array.

    Parameters:
    - paths (list): Entries shaped like {"file": uri, "folder": uri}.
    - path_type (str): Either "file" or "folder".

    Returns:
    - list: DatastorePath objects, skipping null, missing, non-datastore and
      malformed entries.
    """
    result = []
    for entry in paths or []:
        if not isinstance(entry, dict) or path_type not in entry:
            continue
        uri = entry[path_type]
        if not isinstance(uri, str) or not uri.startswith(
            DATASTORE_PATH_PREFIX
        ):
            continue
        try:
            result.append(DatastorePath.parse(uri))
        except ValueError as e:
            logger.warning(f"Skipping dataset path: {str(e)}")
    return result


def to_dataset_version(dataset_name, document):
    paths = get_path(document, "properties.paths", [])
    try:
        version = int(get_path(document, "name", 0))
    except (TypeError, ValueError):
        version = 0
    return Dataset(
        id=get_path(document, "id", ""),
        name=dataset_name,
        description=get_path(document, "properties.description", ""),
        datastore_id=get_path(document, "properties.datastoreId", ""),
        version=version,
        file_paths=to_dataset_paths(paths, "file"),
        directory_paths=to_dataset_paths(paths, "folder"),
        system_data=to_system_data(document),
    )


def to_dataset_version_list(dataset_name, document):
    return [
        to_dataset_version(dataset_name, item)
        for item in get_path(document, "value", [])
    ]


def _drop_empty(values):
    return {key: value for key, value in values.items() if value}


def to_datastore_write_schema(datastore):
    credentials = None
    if datastore.auth is not None:
        auth = datastore.auth
        secrets = {"secretsType": auth.credentials_type}
        secrets.update(
            _drop_empty(
                {
                    "key": auth.account_key,
                    "clientSecret": auth.client_secret,
                    "password": auth.sql_user_password,
                }
            )
        )
        credentials = {
            "credentialsType": auth.credentials_type,
            "secrets": secrets,
        }
        credentials.update(
            _drop_empty(
                {
                    "clientId": auth.client_id,
                    "tenantId": auth.tenant_id,
                    "userId": auth.sql_user_name,
                }
            )
        )

    contents = {"contentsType": datastore.storage_type}
    contents.update(
        _drop_empty(
            {
                "accountName": datastore.storage_account_name,
                "containerName": datastore.storage_container_name,
            }
        )
    )
    contents["credentials"] = credentials
    contents["endpoint"] = DEFAULT_STORAGE_ENDPOINT
    contents["protocol"] = DEFAULT_STORAGE_PROTOCOL

    return {
        "properties": {
            "contents": contents,
            "isDefault": datastore.is_default,
            "description": datastore.description,
        }
    }


def to_dataset_write_schema(dataset):
    paths = [{"file": str(path)} for path in dataset.file_paths]
    paths.extend({"folder": str(path)} for path in dataset.directory_paths)
    return {
        "properties": {
            "description": dataset.description,
            "paths": paths,
        }
    }
