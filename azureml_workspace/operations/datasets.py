# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import logging

from azureml_workspace.converters import (
    to_dataset_names,
    to_dataset_version,
    to_dataset_version_list,
    to_dataset_write_schema,
)
from azureml_workspace.shared.errors import InvalidArgumentError
from azureml_workspace.shared.utils import (
    check_response,
    is_blank,
    is_not_client_or_server_error,
    read_json_body,
    select_latest,
)

logger = logging.getLogger(__name__)


class DatasetOperations:
    """
    Dataset endpoints of a single workspace.

    Provides list_dataset_names and fetch_versions, so an instance can be
    handed to LatestVersionAggregator as both name lister and version
    fetcher. The underlying ResourceClient is safe to share between threads.
    """

    def __init__(self, client):
        self.client = client

    def list_dataset_names(self):
        """Return the names of the datasets registered in the workspace."""
        logger.debug("Retrieving dataset names of %s", self.client.base_url)
        response = self.client.do_get("datasets")
        check_response(response)
        return to_dataset_names(read_json_body(response))

    def get_dataset_versions(self, dataset_name):
        """Return all the versions of the dataset with the given name."""
        response = self.client.do_get(f"datasets/{dataset_name}/versions")
        check_response(response)
        return to_dataset_version_list(dataset_name, read_json_body(response))

    fetch_versions = get_dataset_versions

    def get_dataset(self, dataset_name, version):
        response = self.client.do_get(
            f"datasets/{dataset_name}/versions/{version}"
        )
        check_response(response)
        return to_dataset_version(dataset_name, read_json_body(response))

    def get_dataset_next_version(self, dataset_name):
        """
        Return the version number a new version of the dataset would get.

        Parameters:
        - dataset_name (str): Name of the dataset.

        Returns:
        - int: The latest registered version plus one, or 1 when the
          dataset has no versions yet.
        """
        latest = select_latest(self.get_dataset_versions(dataset_name))
        return latest.version + 1

    def create_or_update_dataset(self, dataset):
        if is_blank(dataset.name):
            raise InvalidArgumentError("the dataset name cannot be empty")
        if len(dataset.file_paths) + len(dataset.directory_paths) == 0:
            raise InvalidArgumentError(
                "the dataset must have at least one path"
            )

        response = self.client.do_put(
            f"datasets/{dataset.name}/versions/{dataset.version}",
            to_dataset_write_schema(dataset),
        )
        check_response(response, accepted=is_not_client_or_server_error)
        return to_dataset_version(dataset.name, read_json_body(response))

    def delete_dataset(self, dataset_name):
        """Delete the dataset, all of its versions included."""
        response = self.client.do_delete(f"datasets/{dataset_name}")
        check_response(response)
        logger.info(f"Deleted dataset '{dataset_name}'")

    def delete_dataset_version(self, dataset_name, version):
        response = self.client.do_delete(
            f"datasets/{dataset_name}/versions/{version}"
        )
        check_response(response)
        logger.info(f"Deleted version {version} of dataset '{dataset_name}'")
