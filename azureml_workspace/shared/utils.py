# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

import re
from datetime import datetime, timezone

import requests

from azureml_workspace.models import Dataset
from azureml_workspace.shared.errors import (
    HttpResponseError,
    ResourceNotFoundError,
)


def is_blank(value):
    return not isinstance(value, str) or not value.strip()


def get_path(data, path, default=None):
    """
    Look up a dotted path (e.g. "properties.contents.accountName") in a
    decoded JSON document.

    Parameters:
    - data (dict): The decoded JSON document.
    - path (str): Dot-separated sequence of keys.
    - default: Value returned when any key along the path is missing or null.

    Returns:
    - The value found at the path, or the default.
    """
    current = data
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def parse_timestamp(value):
    """Parse an ISO 8601 timestamp from the API into an aware datetime."""
    if not value or not isinstance(value, str):
        return None
    value = value.strip().replace("Z", "+00:00")
    # The API sends 7 fractional digits; datetime only keeps 6
    value = re.sub(r"(\.\d{6})\d+", r"\1", value)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def read_json_body(response: requests.Response):
    """Decode a response body, treating an empty body as an empty object."""
    if not response.content or not response.content.strip():
        return {}
    return response.json()


def check_response(
    response: requests.Response,
    accepted=(200,),
    resource_type=None,
    resource_identifier=None,
):
    """
    Raise the workspace error matching a response status code.

    Parameters:
    - response (requests.Response): The response to check.
    - accepted (tuple or callable): Accepted status codes, or a predicate
      on the status code.
    - resource_type (str): When given, a 404 is reported as a
      ResourceNotFoundError for this resource type.
    - resource_identifier (str): Name of the resource for the 404 message.
    """
    status_code = response.status_code
    if resource_type is not None and status_code == 404:
        raise ResourceNotFoundError(resource_type, resource_identifier)

    if callable(accepted):
        is_accepted = accepted(status_code)
    else:
        is_accepted = status_code in accepted
    if not is_accepted:
        raise HttpResponseError(status_code, response.text)


def is_not_client_or_server_error(status_code):
    return status_code < 400


def select_latest(versions):
    """
    Return the dataset version with the greatest version number.

    The scan starts from an empty Dataset (version 0), so an empty sequence
    returns that placeholder rather than failing.

    Parameters:
    - versions (iterable of Dataset): All versions of a single dataset.

    Returns:
    - Dataset: The latest version, or Dataset() if there are none.
    """
    latest = Dataset()
    for dataset in versions:
        if dataset.version > latest.version:
            latest = dataset
    return latest
