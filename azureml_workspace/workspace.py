# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import logging

from azureml_workspace.config import N_CONCURRENT_WORKERS
from azureml_workspace.operations.datasets import DatasetOperations
from azureml_workspace.operations.datastores import DatastoreOperations
from azureml_workspace.operations.latest_versions import (
    LatestVersionAggregator,
)
from azureml_workspace.shared.aml_client import (
    ResourceClientBuilder,
    get_credential,
)

PACKAGE_LOGGER = "azureml_workspace"


class Workspace:
    """
    Client for the datastores and datasets of Azure ML workspaces.

    Every operation takes the resource group and the name of the workspace
    it applies to, so a single Workspace serves all the workspaces of a
    subscription.
    """

    def __init__(self, client_builder, max_workers=N_CONCURRENT_WORKERS):
        self.client_builder = client_builder
        self.max_workers = max_workers

    @classmethod
    def new(cls, config, debug=False):
        """
        Create a Workspace authenticated with the service principal of the
        given configuration.

        Parameters:
        - config (Config): Credentials and client settings.
        - debug (bool): Log at DEBUG level instead of INFO.

        Returns:
            Workspace: The workspace client

        Raises:
            ValueError: If the configuration has no usable credentials
        """
        logging.getLogger(PACKAGE_LOGGER).setLevel(
            logging.DEBUG if debug else logging.INFO
        )
        credential = get_credential(config)
        builder = ResourceClientBuilder(
            credential,
            config.subscription_id,
            timeout=config.request_timeout,
        )
        return cls(builder, max_workers=config.max_workers)

    def _datastores(self, resource_group, workspace):
        client = self.client_builder.new_client(resource_group, workspace)
        return DatastoreOperations(client)

    def _datasets(self, resource_group, workspace):
        client = self.client_builder.new_client(resource_group, workspace)
        return DatasetOperations(client)

    def get_datastores(self, resource_group, workspace):
        return self._datastores(resource_group, workspace).get_datastores()

    def get_datastore(self, resource_group, workspace, datastore_name):
        return self._datastores(resource_group, workspace).get_datastore(
            datastore_name
        )

    def delete_datastore(self, resource_group, workspace, datastore_name):
        self._datastores(resource_group, workspace).delete_datastore(
            datastore_name
        )

    def create_or_update_datastore(self, resource_group, workspace, datastore):
        return self._datastores(
            resource_group, workspace
        ).create_or_update_datastore(datastore)

    def get_datasets(self, resource_group, workspace):
        """
        Return the datasets of the workspace, only the latest version of
        each, in the order the API lists them.
        """
        datasets = self._datasets(resource_group, workspace)
        names = datasets.list_dataset_names()
        aggregator = LatestVersionAggregator(
            datasets, max_workers=self.max_workers
        )
        latest_versions = aggregator.resolve_latest_versions(names)
        return [latest_versions[name] for name in dict.fromkeys(names)]

    def get_dataset(self, resource_group, workspace, dataset_name, version):
        return self._datasets(resource_group, workspace).get_dataset(
            dataset_name, version
        )

    def get_dataset_versions(self, resource_group, workspace, dataset_name):
        return self._datasets(resource_group, workspace).get_dataset_versions(
            dataset_name
        )

    def get_dataset_next_version(
        self, resource_group, workspace, dataset_name
    ):
        return self._datasets(
            resource_group, workspace
        ).get_dataset_next_version(dataset_name)

    def create_or_update_dataset(self, resource_group, workspace, dataset):
        return self._datasets(
            resource_group, workspace
        ).create_or_update_dataset(dataset)

    def delete_dataset(self, resource_group, workspace, dataset_name):
        self._datasets(resource_group, workspace).delete_dataset(dataset_name)

    def delete_dataset_version(
        self, resource_group, workspace, dataset_name, version
    ):
        self._datasets(resource_group, workspace).delete_dataset_version(
            dataset_name, version
        )
