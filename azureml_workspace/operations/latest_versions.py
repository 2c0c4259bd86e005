# Copyright (c) 2025 The Regents of the University of California
# SPDX-License-Identifier: BSD-3-Clause

"""
Concurrent lookup of the latest version of many datasets.

The workspace API has no endpoint returning the latest version of every
dataset, so LatestVersionAggregator lists the versions of each dataset in a
bounded thread pool and keeps the greatest one. The first failed request
cancels the rest of the lookup and is raised unchanged to the caller.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Protocol

from azureml_workspace.config import N_CONCURRENT_WORKERS
from azureml_workspace.models import Dataset
from azureml_workspace.shared.errors import ResourceNotFoundError
from azureml_workspace.shared.utils import select_latest

logger = logging.getLogger(__name__)

# Returned by a unit of work that gave up because the lookup was cancelled
_ABANDONED = object()


class VersionFetcher(Protocol):
    def fetch_versions(self, dataset_name: str) -> List[Dataset]: ...


class DatasetNameLister(Protocol):
    def list_dataset_names(self) -> List[str]: ...


class CancellationToken:
    """
    Cancellation signal shared by the units of a single lookup.

    Only the first call to cancel() takes effect, so the error stored on the
    token is always the first one reported.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.error = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, error=None) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self.error = error
            self._event.set()
            return True


class LatestVersionAggregator:
    """
    Resolves dataset names to their latest versions with at most
    max_workers requests in flight.

    Parameters:
    - fetcher (VersionFetcher): Lists the versions of one dataset; called
      concurrently from the worker threads.
    - max_workers (int): Upper bound on concurrent fetches.
    - strict (bool): Raise ResourceNotFoundError for a dataset without
      versions instead of returning an empty Dataset() for it.
    """

    def __init__(
        self,
        fetcher: VersionFetcher,
        max_workers: int = N_CONCURRENT_WORKERS,
        strict: bool = False,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.fetcher = fetcher
        self.max_workers = max_workers
        self.strict = strict

    def resolve_latest_versions(
        self, dataset_names: Iterable[str]
    ) -> Dict[str, Dataset]:
        """
        Return the latest version of each dataset, keyed by dataset name.

        A dataset with no versions maps to Dataset() (version 0) unless the
        aggregator is strict. If any fetch fails, the first error is raised
        once all the started fetches have returned, and no result is
        returned.
        """
        names = list(dataset_names)
        if not names:
            return {}

        gate = threading.BoundedSemaphore(self.max_workers)
        token = CancellationToken()
        failure = None

        with ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(names)),
            thread_name_prefix="dataset-version",
        ) as executor:
            futures = {
                executor.submit(self._resolve_one, name, gate, token): name
                for name in names
            }
            for future in as_completed(futures):
                if future.cancelled() or future.exception() is None:
                    continue
                failure = future.exception()
                # Units still queued never start their fetch
                for pending in futures:
                    pending.cancel()
                break
        # Leaving the executor waits for every started unit to finish

        error = token.error if token.error is not None else failure
        if error is not None:
            logger.error(f"Error retrieving latest dataset versions: {error}")
            raise error

        result = {}
        for future, name in futures.items():
            latest = future.result()
            if latest is not _ABANDONED:
                result[name] = latest
        return result

    def _resolve_one(self, dataset_name, gate, token):
        if token.cancelled:
            logger.debug("Lookup cancelled, skipping dataset %r", dataset_name)
            return _ABANDONED

        with gate:
            if token.cancelled:
                logger.debug(
                    "Lookup cancelled, skipping dataset %r", dataset_name
                )
                return _ABANDONED

            logger.debug("Fetching latest version of dataset %r", dataset_name)
            try:
                versions = self.fetcher.fetch_versions(dataset_name)
                if self.strict and not versions:
                    raise ResourceNotFoundError("dataset", dataset_name)
            except Exception as e:
                token.cancel(e)
                raise

        return select_latest(versions)
