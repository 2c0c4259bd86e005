#!/usr/bin/env python3
# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import json
import os
import unittest
from datetime import datetime, timezone
from unittest import mock

import requests
from example_responses import (
    MockedClientBuilder,
    load_example_resp,
    make_response,
    mocked_client,
)

from azureml_workspace import Config, Workspace
from azureml_workspace.config import N_CONCURRENT_WORKERS
from azureml_workspace.models import Dataset, Datastore, DatastorePath
from azureml_workspace.shared.aml_client import (
    AML_API_VERSION,
    ResourceClientBuilder,
)
from azureml_workspace.shared.errors import (
    HttpResponseError,
    InvalidArgumentError,
    ResourceNotFoundError,
)


def new_workspace(client):
    return Workspace(MockedClientBuilder(client))


class TestNewWorkspace(unittest.TestCase):
    """Unit tests for creating a Workspace from a configuration"""

    def test_new_workspace_empty_config(self):
        with self.assertRaises(ValueError):
            Workspace.new(Config())

    def test_new_workspace_invalid_auth(self):
        """Credentials are only checked when the first request is sent."""
        config = Config(
            client_id="invalid",
            client_secret="invalid",
            tenant_id="invalid",
            subscription_id="subscription",
        )
        workspace = Workspace.new(config)
        self.assertIsInstance(workspace, Workspace)
        self.assertEqual(workspace.max_workers, N_CONCURRENT_WORKERS)

    def test_config_from_env(self):
        env = {
            "AZURE_CLIENT_ID": "client",
            "AZURE_CLIENT_SECRET": "secret",
            "AZURE_TENANT_ID": "tenant",
            "AZURE_SUBSCRIPTION_ID": "subscription",
            "AZUREML_MAX_WORKERS": "8",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        self.assertEqual(config.client_id, "client")
        self.assertEqual(config.subscription_id, "subscription")
        self.assertEqual(config.max_workers, 8)

    def test_config_from_env_missing_variables(self):
        with mock.patch.dict(
            os.environ, {"AZURE_CLIENT_ID": "client"}, clear=True
        ):
            with self.assertRaises(ValueError) as ctx:
                Config.from_env()
        self.assertIn("AZURE_CLIENT_SECRET", str(ctx.exception))
        self.assertIn("AZURE_SUBSCRIPTION_ID", str(ctx.exception))
        self.assertNotIn("AZURE_CLIENT_ID,", str(ctx.exception))


class TestResourceClient(unittest.TestCase):
    """Unit tests for the requests sent to the workspace API"""

    def setUp(self):
        self.credential = mock.Mock()
        self.credential.get_token.return_value = mock.Mock(token="jwt")
        self.session = mock.Mock()
        self.session.request.return_value = make_response(200, b"{}")
        builder = ResourceClientBuilder(
            self.credential, "sub-1", timeout=12, session=self.session
        )
        self.client = builder.new_client("rg-1", "ws-1")

    def test_get_request(self):
        self.client.do_get("datastores")
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "GET")
        self.assertEqual(
            args[1],
            "https://management.azure.com/subscriptions/sub-1"
            "/resourceGroups/rg-1/providers/"
            "Microsoft.MachineLearningServices/workspaces/ws-1/datastores",
        )
        self.assertEqual(kwargs["params"], {"api-version": AML_API_VERSION})
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer jwt")
        self.assertEqual(kwargs["timeout"], 12)
        self.assertIsNone(kwargs["data"])

    def test_put_request_sends_json(self):
        self.client.do_put("datastores/foo", {"properties": {}})
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "PUT")
        self.assertEqual(
            kwargs["headers"]["Content-Type"], "application/json"
        )
        self.assertEqual(json.loads(kwargs["data"]), {"properties": {}})

    def test_delete_request(self):
        self.client.do_delete("datasets/foo")
        args, _ = self.session.request.call_args
        self.assertEqual(args[0], "DELETE")
        self.assertTrue(args[1].endswith("/datasets/foo"))


class TestDatastores(unittest.TestCase):
    """Unit tests for the datastore operations"""

    def test_get_datastores(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_datastore_list.json")
        )
        datastores = new_workspace(client).get_datastores("rg", "ws")
        self.assertEqual(len(datastores), 2)
        self.assertEqual(datastores[0].name, "datastore-1")
        self.assertTrue(datastores[1].is_default)
        client.do_get.assert_called_once_with("datastores")

    def test_get_datastores_empty_list(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_empty_list.json")
        )
        self.assertEqual(new_workspace(client).get_datastores("rg", "ws"), [])

    def test_get_datastores_http_error(self):
        client = mocked_client(500, "error")
        with self.assertRaises(HttpResponseError) as ctx:
            new_workspace(client).get_datastores("rg", "ws")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.response_content, "error")

    def test_get_datastore(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_datastore.json")
        )
        datastore = new_workspace(client).get_datastore("rg", "ws", "foo")
        self.assertEqual(datastore.id, "id-1")
        self.assertEqual(datastore.storage_type, "AzureBlob")
        self.assertEqual(datastore.auth.credentials_type, "AccountKey")
        self.assertEqual(
            datastore.system_data.creation_date,
            datetime(2021, 10, 25, 10, 53, 40, 700170, tzinfo=timezone.utc),
        )
        client.do_get.assert_called_once_with("datastores/foo")

    def test_get_datastore_not_found(self):
        client = mocked_client(404, "")
        with self.assertRaises(ResourceNotFoundError) as ctx:
            new_workspace(client).get_datastore("rg", "ws", "foo")
        self.assertEqual(str(ctx.exception), "datastore foo not found")

    def test_get_datastore_bad_request(self):
        client = mocked_client(400, "")
        with self.assertRaises(HttpResponseError) as ctx:
            new_workspace(client).get_datastore("rg", "ws", "foo")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_get_datastore_client_error(self):
        error = requests.ConnectionError("unreachable")
        client = mocked_client(error=error)
        with self.assertRaises(requests.ConnectionError) as ctx:
            new_workspace(client).get_datastore("rg", "ws", "foo")
        self.assertIs(ctx.exception, error)

    def test_delete_datastore(self):
        client = mocked_client(200, "")
        new_workspace(client).delete_datastore("rg", "ws", "foo")
        client.do_delete.assert_called_once_with("datastores/foo")

    def test_delete_datastore_not_found(self):
        client = mocked_client(404, "")
        with self.assertRaises(ResourceNotFoundError):
            new_workspace(client).delete_datastore("rg", "ws", "foo")

    def test_create_or_update_datastore_empty_name(self):
        client = mocked_client(200, "")
        with self.assertRaises(InvalidArgumentError):
            new_workspace(client).create_or_update_datastore(
                "rg", "ws", Datastore(name="  ")
            )
        client.do_put.assert_not_called()

    def test_create_or_update_datastore(self):
        client = mocked_client(
            201, load_example_resp("example_resp_get_datastore.json")
        )
        datastore = new_workspace(client).create_or_update_datastore(
            "rg", "ws", Datastore(name="datastore-1")
        )
        self.assertEqual(datastore.name, "datastore-1")
        path, body = client.do_put.call_args[0]
        self.assertEqual(path, "datastores/datastore-1")
        self.assertIn("properties", body)

    def test_create_or_update_datastore_http_error(self):
        client = mocked_client(409, "conflict")
        with self.assertRaises(HttpResponseError):
            new_workspace(client).create_or_update_datastore(
                "rg", "ws", Datastore(name="datastore-1")
            )


class TestDatasets(unittest.TestCase):
    """Unit tests for the dataset operations"""

    def test_get_datasets(self):
        names_resp = make_response(
            200, load_example_resp("example_resp_get_datasets.json")
        )
        versions_body = load_example_resp(
            "example_resp_get_dataset_versions.json"
        )

        def do_get(path):
            if path == "datasets":
                return names_resp
            return make_response(200, versions_body)

        client = mock.Mock()
        client.base_url = "https://management.azure.com/mocked"
        client.do_get.side_effect = do_get

        datasets = new_workspace(client).get_datasets("rg", "ws")

        self.assertEqual(
            [d.name for d in datasets], ["dataset-1", "dataset-2", "dataset-3"]
        )
        self.assertTrue(all(d.version == 4 for d in datasets))
        self.assertEqual(client.do_get.call_count, 4)

    def test_get_datasets_no_datasets(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_empty_list.json")
        )
        self.assertEqual(new_workspace(client).get_datasets("rg", "ws"), [])
        client.do_get.assert_called_once_with("datasets")

    def test_get_datasets_version_lookup_fails(self):
        names_resp = make_response(
            200, load_example_resp("example_resp_get_datasets.json")
        )

        def do_get(path):
            if path == "datasets":
                return names_resp
            return make_response(500, "error")

        client = mock.Mock()
        client.base_url = "https://management.azure.com/mocked"
        client.do_get.side_effect = do_get

        with self.assertRaises(HttpResponseError) as ctx:
            new_workspace(client).get_datasets("rg", "ws")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.response_content, "error")

    def test_get_datasets_names_http_error(self):
        client = mocked_client(500, "error")
        with self.assertRaises(HttpResponseError):
            new_workspace(client).get_datasets("rg", "ws")
        client.do_get.assert_called_once_with("datasets")

    def test_get_dataset_versions(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_dataset_versions.json")
        )
        versions = new_workspace(client).get_dataset_versions(
            "rg", "ws", "dataset-1"
        )
        self.assertEqual([v.version for v in versions], [1, 4, 2])
        self.assertTrue(all(v.name == "dataset-1" for v in versions))
        client.do_get.assert_called_once_with("datasets/dataset-1/versions")

    def test_get_dataset_versions_empty_body(self):
        client = mocked_client(200, "")
        versions = new_workspace(client).get_dataset_versions(
            "rg", "ws", "dataset-1"
        )
        self.assertEqual(versions, [])

    def test_get_dataset(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_dataset.json")
        )
        dataset = new_workspace(client).get_dataset("rg", "ws", "foo", 3)
        self.assertEqual(dataset.id, "<id>")
        self.assertEqual(dataset.version, 3)
        self.assertEqual(len(dataset.file_paths), 1)
        client.do_get.assert_called_once_with("datasets/foo/versions/3")

    def test_get_dataset_not_found(self):
        client = mocked_client(404, "not found")
        with self.assertRaises(HttpResponseError) as ctx:
            new_workspace(client).get_dataset("rg", "ws", "foo", 3)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_get_dataset_client_error(self):
        client = mocked_client(error=requests.ConnectionError("error"))
        with self.assertRaises(requests.ConnectionError) as ctx:
            new_workspace(client).get_dataset("rg", "ws", "foo", 3)
        self.assertEqual(str(ctx.exception), "error")

    def test_get_dataset_next_version(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_dataset_versions.json")
        )
        next_version = new_workspace(client).get_dataset_next_version(
            "rg", "ws", "foo"
        )
        self.assertEqual(next_version, 5)

    def test_get_dataset_next_version_no_versions(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_empty_list.json")
        )
        next_version = new_workspace(client).get_dataset_next_version(
            "rg", "ws", "foo"
        )
        self.assertEqual(next_version, 1)

    def test_get_dataset_next_version_http_error(self):
        client = mocked_client(500, "error")
        with self.assertRaises(HttpResponseError):
            new_workspace(client).get_dataset_next_version("rg", "ws", "foo")

    def test_create_or_update_dataset_empty_name(self):
        client = mocked_client(200, "")
        dataset = Dataset(file_paths=[DatastorePath("ds", "file.csv")])
        with self.assertRaises(InvalidArgumentError):
            new_workspace(client).create_or_update_dataset("rg", "ws", dataset)
        client.do_put.assert_not_called()

    def test_create_or_update_dataset_without_paths(self):
        client = mocked_client(200, "")
        with self.assertRaises(InvalidArgumentError) as ctx:
            new_workspace(client).create_or_update_dataset(
                "rg", "ws", Dataset(name="foo")
            )
        self.assertEqual(
            str(ctx.exception), "the dataset must have at least one path"
        )

    def test_create_or_update_dataset(self):
        client = mocked_client(
            200, load_example_resp("example_resp_get_dataset.json")
        )
        dataset = Dataset(
            name="foo",
            version=3,
            directory_paths=[DatastorePath("ds", "/data/")],
        )
        updated = new_workspace(client).create_or_update_dataset(
            "rg", "ws", dataset
        )
        self.assertEqual(updated.id, "<id>")
        self.assertEqual(updated.name, "foo")
        path, body = client.do_put.call_args[0]
        self.assertEqual(path, "datasets/foo/versions/3")
        self.assertEqual(
            body["properties"]["paths"],
            [{"folder": "azureml://datastores/ds/paths/data/"}],
        )

    def test_create_or_update_dataset_http_error(self):
        client = mocked_client(404, "not found")
        dataset = Dataset(
            name="foo", file_paths=[DatastorePath("ds", "file.csv")]
        )
        with self.assertRaises(HttpResponseError) as ctx:
            new_workspace(client).create_or_update_dataset("rg", "ws", dataset)
        self.assertEqual(ctx.exception.response_content, "not found")

    def test_delete_dataset(self):
        client = mocked_client(200, "")
        new_workspace(client).delete_dataset("rg", "ws", "foo")
        client.do_delete.assert_called_once_with("datasets/foo")

    def test_delete_dataset_http_error(self):
        client = mocked_client(404, "")
        with self.assertRaises(HttpResponseError):
            new_workspace(client).delete_dataset("rg", "ws", "foo")

    def test_delete_dataset_version(self):
        client = mocked_client(200, "")
        new_workspace(client).delete_dataset_version("rg", "ws", "foo", 2)
        client.do_delete.assert_called_once_with("datasets/foo/versions/2")


if __name__ == "__main__":
    unittest.main()
