"""Google Cloud Monitoring transport adapter.

Sends each batch as one projects.timeSeries.create call using the
googleapiclient discovery client.
See https://cloud.google.com/monitoring/api/ref_v3/rest/v3/projects.timeSeries/create
"""

import json
import logging
import threading
from collections.abc import Sequence
from typing import Any

from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from metricsbridge.core.encoding.timeseries import encode_batch
from metricsbridge.core.errors import TransportError
from metricsbridge.core.models import OutputRecord

logger = logging.getLogger(__name__)


def _api_endpoint(endpoint: str) -> str:
    """Turn a host[:port] endpoint into the URL form the REST client needs."""
    if "://" in endpoint:
        return endpoint
    host = endpoint.removesuffix(":443")
    return f"https://{host}/"


class CloudMonitoringTransport:
    """TransportPort implementation backed by the Cloud Monitoring v3 API.

    Requests are serialized, so one transport can be shared by overlapping
    writer invocations.

    Args:
        project_id: Project the time series are written to.
        service: Prebuilt discovery resource. Built with application
            default credentials when omitted.
        endpoint: Optional API endpoint override, as host[:port] or URL.
    """

    def __init__(
        self,
        project_id: str,
        service: Any | None = None,
        endpoint: str | None = None,
    ) -> None:
        if not project_id:
            raise ValueError("project_id is required")
        self._project_name = f"projects/{project_id}"
        if service is None:
            client_options = None
            if endpoint:
                client_options = {"api_endpoint": _api_endpoint(endpoint)}
            service = build(
                "monitoring",
                "v3",
                cache_discovery=False,
                client_options=client_options,
            )
        self._service = service
        # the discovery client shares one httplib2.Http, which is not thread-safe
        self._lock = threading.Lock()

    @property
    def project_name(self) -> str:
        return self._project_name

    def send(self, batch: Sequence[OutputRecord]) -> None:
        """Create the batch's time series in one request.

        Raises:
            TransportError: If the API call fails.
        """
        body = encode_batch(batch)
        logger.debug("timeSeries.create body: %s", json.dumps(body, sort_keys=True))
        try:
            with self._lock:
                self._service.projects().timeSeries().create(
                    name=self._project_name, body=body
                ).execute()
        except HttpError as he:
            raise TransportError(f"Monitoring API rejected batch: {he}") from he
        except (GoogleAuthError, OSError) as e:
            raise TransportError(f"Could not reach Monitoring API: {e}") from e

    def close(self) -> None:
        with self._lock:
            self._service.close()
