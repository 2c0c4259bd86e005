# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import logging

from azureml_workspace.converters import (
    to_datastore,
    to_datastore_list,
    to_datastore_write_schema,
)
from azureml_workspace.shared.errors import InvalidArgumentError
from azureml_workspace.shared.utils import (
    check_response,
    is_blank,
    is_not_client_or_server_error,
    read_json_body,
)

logger = logging.getLogger(__name__)


class DatastoreOperations:
    """Datastore endpoints of a single workspace."""

    def __init__(self, client):
        self.client = client

    def get_datastores(self):
        """Return every datastore of the workspace."""
        response = self.client.do_get("datastores")
        check_response(response)
        return to_datastore_list(read_json_body(response))

    def get_datastore(self, datastore_name):
        """
        Return the datastore with the given name.

        Raises:
        - ResourceNotFoundError: The workspace has no such datastore.
        - HttpResponseError: The API answered with any other error.
        """
        response = self.client.do_get(f"datastores/{datastore_name}")
        check_response(
            response,
            resource_type="datastore",
            resource_identifier=datastore_name,
        )
        return to_datastore(read_json_body(response))

    def delete_datastore(self, datastore_name):
        response = self.client.do_delete(f"datastores/{datastore_name}")
        check_response(
            response,
            resource_type="datastore",
            resource_identifier=datastore_name,
        )
        logger.info(f"Deleted datastore '{datastore_name}'")

    def create_or_update_datastore(self, datastore):
        if is_blank(datastore.name):
            raise InvalidArgumentError("the datastore name cannot be empty")

        response = self.client.do_put(
            f"datastores/{datastore.name}",
            to_datastore_write_schema(datastore),
        )
        check_response(response, accepted=is_not_client_or_server_error)
        return to_datastore(read_json_body(response))
