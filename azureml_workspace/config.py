# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import logging
import os
from dataclasses import dataclass

N_CONCURRENT_WORKERS = 5
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass
class Config:
    """Service principal credentials and client settings."""

    client_id: str = ""
    client_secret: str = ""
    tenant_id: str = ""
    subscription_id: str = ""
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_workers: int = N_CONCURRENT_WORKERS

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load the configuration from environment variables.

        Required environment variables:
        - AZURE_CLIENT_ID: Application (client) id of the service principal
        - AZURE_CLIENT_SECRET: Secret of the service principal
        - AZURE_TENANT_ID: Microsoft Entra tenant id
        - AZURE_SUBSCRIPTION_ID: Subscription holding the workspaces

        Optional environment variables:
        - AZUREML_REQUEST_TIMEOUT: Per-request timeout in seconds
        - AZUREML_MAX_WORKERS: Concurrent requests used to list datasets

        Returns:
            Config: The loaded configuration
        """
        required = {
            "AZURE_CLIENT_ID": os.environ.get("AZURE_CLIENT_ID"),
            "AZURE_CLIENT_SECRET": os.environ.get("AZURE_CLIENT_SECRET"),
            "AZURE_TENANT_ID": os.environ.get("AZURE_TENANT_ID"),
            "AZURE_SUBSCRIPTION_ID": os.environ.get("AZURE_SUBSCRIPTION_ID"),
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            logging.getLogger(__name__).error(
                "Missing Azure ML workspace configuration"
            )
            raise ValueError(
                "Missing required environment variables: "
                f"{', '.join(missing)}"
            )

        try:
            request_timeout = float(
                os.environ.get(
                    "AZUREML_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT
                )
            )
            max_workers = int(
                os.environ.get("AZUREML_MAX_WORKERS", N_CONCURRENT_WORKERS)
            )
        except ValueError as e:
            raise ValueError(f"Invalid Azure ML client setting: {e}") from e

        return cls(
            client_id=required["AZURE_CLIENT_ID"],
            client_secret=required["AZURE_CLIENT_SECRET"],
            tenant_id=required["AZURE_TENANT_ID"],
            subscription_id=required["AZURE_SUBSCRIPTION_ID"],
            request_timeout=request_timeout,
            max_workers=max_workers,
        )

    def validate(self):
        missing = [
            name
            for name in ("client_id", "client_secret", "tenant_id")
            if not getattr(self, name).strip()
        ]
        if missing:
            raise ValueError(
                f"Missing required configuration values: {', '.join(missing)}"
            )
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
