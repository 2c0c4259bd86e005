# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import json
import logging

import requests
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import ClientSecretCredential

AML_API_VERSION = "2021-10-01"
AML_WORKSPACE_API_BASE_URL = (
    "https://management.azure.com/subscriptions/{subscription_id}"
    "/resourceGroups/{resource_group}"
    "/providers/Microsoft.MachineLearningServices/workspaces/{workspace}"
)
DEFAULT_AML_OAUTH_SCOPE = "https://management.azure.com/.default"
AUTHORITY_HOST = "login.microsoftonline.com"

logger = logging.getLogger(__name__)


def get_credential(config):
    """
    Creates the service principal credential used to sign API requests.

    Token caching and refresh are handled by azure-identity: each call to
    get_token returns the cached token until it is about to expire.

    Parameters:
    - config (Config): Client configuration with the service principal.

    Returns:
        ClientSecretCredential: A credential for the configured tenant
    """
    config.validate()
    return ClientSecretCredential(
        tenant_id=config.tenant_id,
        client_id=config.client_id,
        client_secret=config.client_secret,
        authority=AUTHORITY_HOST,
    )


class ResourceClientBuilder:
    """Builds ResourceClients sharing one credential and HTTP session."""

    def __init__(
        self, credential, subscription_id, timeout=None, session=None
    ):
        self.credential = credential
        self.subscription_id = subscription_id
        self.timeout = timeout
        self.session = session or requests.Session()

    def new_client(self, resource_group, workspace):
        return ResourceClient(
            credential=self.credential,
            subscription_id=self.subscription_id,
            resource_group=resource_group,
            workspace=workspace,
            session=self.session,
            timeout=self.timeout,
        )


class ResourceClient:
    """Issues requests against the REST API of a single AML workspace."""

    def __init__(
        self,
        credential,
        subscription_id,
        resource_group,
        workspace,
        session,
        timeout=None,
    ):
        self.credential = credential
        self.base_url = AML_WORKSPACE_API_BASE_URL.format(
            subscription_id=subscription_id,
            resource_group=resource_group,
            workspace=workspace,
        )
        self.session = session
        self.timeout = timeout

    def _get_token(self) -> str:
        logger.debug("Acquiring access token for %s", DEFAULT_AML_OAUTH_SCOPE)
        try:
            return self.credential.get_token(DEFAULT_AML_OAUTH_SCOPE).token
        except ClientAuthenticationError as e:
            logger.error(f"Could not acquire access token: {str(e)}")
            raise

    def _request(self, method, path, body=None) -> requests.Response:
        headers = {"Authorization": f"Bearer {self._get_token()}"}
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body)

        url = f"{self.base_url}/{path}"
        logger.info(f"{method} > {url}")
        return self.session.request(
            method,
            url,
            params={"api-version": AML_API_VERSION},
            headers=headers,
            data=data,
            timeout=self.timeout,
        )

    def do_get(self, path) -> requests.Response:
        return self._request("GET", path)

    def do_delete(self, path) -> requests.Response:
        return self._request("DELETE", path)

    def do_put(self, path, body) -> requests.Response:
        return self._request("PUT", path, body)
