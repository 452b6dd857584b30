"""Upload of the generated Javadoc bundle to the documentation bucket.

The bundle is stored under ``{artifact_name}/{project_version}/{file_name}``.
Uploads are not retried and existing objects are overwritten; any storage
failure aborts the publish step with ``UploadError``.
"""
from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import requests
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from common.logging_utils import extra_context, is_debug_enabled, Timer
from release_config import ReleaseConfig
from .naming import artifact_name

logger = logging.getLogger(__name__)


class AmbiguousOutputError(RuntimeError):
    """Raised when the documentation bundle is not exactly one file."""


class UploadError(RuntimeError):
    """Raised when the blob store rejects or fails the upload."""


class BlobStorage(Protocol):  # pylint: disable=too-few-public-methods
    """Minimal blob storage interface used by the publisher."""

    def upload(self, bucket: str, object_key: str, local_path: str) -> None:
        """Store ``local_path`` as ``object_key`` in ``bucket``."""


class GcsBlobStorage:
    """Google Cloud Storage backend."""

    def __init__(self, project: Optional[str] = None, client: Optional[storage.Client] = None):
        self._project = project
        self._client = client

    @property
    def client(self) -> storage.Client:
        """Storage client, created on first use."""
        if self._client is None:
            self._client = storage.Client(project=self._project)
        return self._client

    def upload(self, bucket: str, object_key: str, local_path: str) -> None:
        blob = self.client.bucket(bucket).blob(object_key)
        blob.upload_from_filename(local_path)


@dataclass(frozen=True)
class UploadTarget:
    """Destination of an upload."""
    bucket: str
    object_key: str

    @property
    def uri(self) -> str:
        """``gs://`` URI of the destination, for logs and reports."""
        return f"gs://{self.bucket}/{self.object_key}"


def object_key(artifact: str, project_version: str, file_name: str) -> str:
    """Object key for a documentation file of one release."""
    return f"{artifact}/{project_version}/{file_name}"


def find_single_output(paths: Sequence[str]) -> str:
    """Return the only file in ``paths``.

    Raises:
        AmbiguousOutputError: if there are zero or several files.
    """
    files = [p for p in paths if os.path.isfile(p)]
    if len(files) != 1:
        listing = ", ".join(sorted(files)) or "none"
        raise AmbiguousOutputError(
            f"Expected exactly one documentation bundle, found {len(files)}: {listing}"
        )
    return files[0]


def find_bundle(docs_dir: str, pattern: str) -> str:
    """Locate the single bundle matching ``pattern`` inside ``docs_dir``."""
    return find_single_output(sorted(glob.glob(os.path.join(docs_dir, pattern))))


class JavadocPublisher:
    """Publishes a release's Javadoc bundle to the configured bucket."""

    def __init__(self, config: ReleaseConfig, blob_storage: Optional[BlobStorage] = None):
        self.config = config
        self.blob_storage = blob_storage

    def target_for(self, bundle_path: str) -> UploadTarget:
        """Compute the upload target for ``bundle_path`` without touching the store."""
        key = object_key(
            artifact_name(self.config),
            self.config.require("project_version"),
            os.path.basename(bundle_path),
        )
        return UploadTarget(bucket=self.config.require("docs_bucket"), object_key=key)

    def _storage(self) -> BlobStorage:
        if self.blob_storage is None:
            self.blob_storage = GcsBlobStorage(project=self.config.docs_project)
        return self.blob_storage

    def publish(self, bundle_path: str, dry_run: bool = False) -> UploadTarget:
        """Upload ``bundle_path`` and return where it was stored.

        Raises:
            UploadError: if the storage call fails for any reason.
        """
        target = self.target_for(bundle_path)
        if dry_run:
            logger.info("Dry run: would upload %s to %s", bundle_path, target.uri)
            return target

        if is_debug_enabled(logger):
            logger.debug(
                "Uploading documentation bundle",
                extra=extra_context(
                    event="upload_request",
                    component="docs_upload",
                    action="upload",
                    target=target.uri
                )
            )
        with Timer() as timer:
            try:
                self._storage().upload(target.bucket, target.object_key, bundle_path)
            except (GoogleAPIError, GoogleAuthError, requests.RequestException, OSError) as exc:
                logger.error("Upload of %s to %s failed: %s", bundle_path, target.uri, exc)
                raise UploadError(f"Upload to {target.uri} failed: {exc}") from exc
        logger.info("Uploaded %s to %s in %s ms", os.path.basename(bundle_path), target.uri, timer.duration_ms())
        return target
