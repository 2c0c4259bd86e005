# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause


class WorkspaceError(Exception):
    """Base class for errors raised by the workspace client."""


class HttpResponseError(WorkspaceError):
    """The workspace API answered with a non-success status code."""

    def __init__(self, status_code: int, response_content: str):
        self.status_code = status_code
        self.response_content = response_content
        super().__init__(
            f"HTTP Response is in error [status code {status_code}]: "
            f"{response_content}"
        )


class ResourceNotFoundError(WorkspaceError):
    def __init__(self, resource_type: str, resource_identifier: str):
        self.resource_type = resource_type
        self.resource_identifier = resource_identifier
        super().__init__(f"{resource_type} {resource_identifier} not found")


class InvalidArgumentError(WorkspaceError, ValueError):
    pass
