"""Writer exporting runtime metric samples to Google Cloud Monitoring.

The host runtime creates one CloudMonitoringWriter, initializes it once
with its deployment properties, then calls write() periodically with the
samples collected since the previous call.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from metricsbridge.adapters.config_file import load_mapping_config
from metricsbridge.adapters.transport.cloud_monitoring import CloudMonitoringTransport
from metricsbridge.core.aggregation import aggregate
from metricsbridge.core.batching import MAX_TIMESERIES_PER_REQUEST, partition
from metricsbridge.core.config import MappingConfig
from metricsbridge.core.errors import TransportError
from metricsbridge.core.models import OutputRecord, Sample
from metricsbridge.core.ports import Clock, TransportPort
from metricsbridge.core.records import build_records
from metricsbridge.core.watermark import Watermark, compute_window

logger = logging.getLogger(__name__)

WRITER_NAME = "google_cloud_monitoring_writer"

# Host property names
PROJECT = "project"
ORG_ID = "org_id"
LOCATION = "location"
ANTHOS_CLUSTER = "anthos_cluster"
INSTANCE_ID = "instance_id"
WRITE_FREQUENCY_SECONDS = "write.frequency.seconds"
MONITORING_ENDPOINT = "monitoring.endpoint"
CONFIG_FILE_PATH = "config.file.path"

# Autofill context keys
RESOURCE_CONTAINER = "resource_container"
VERSION = "version"

DEFAULT_POLL_INTERVAL_SECONDS = 60

TransportFactory = Callable[[str, str | None], TransportPort]


@dataclass(frozen=True)
class WriterContext:
    """Deployment information handed over by the host at initialization.

    Attributes:
        properties: Writer properties (see the property name constants).
        platform_version: Version string of the host platform.
    """

    properties: Mapping[str, str] = field(default_factory=dict)
    platform_version: str | None = None


def build_autofill_context(
    properties: Mapping[str, str], platform_version: str | None
) -> dict[str, str]:
    """Assemble the deployment-wide label values rules can autofill.

    Properties that are not set are left out.
    """
    candidates = {
        RESOURCE_CONTAINER: properties.get(PROJECT),
        ORG_ID: properties.get(ORG_ID),
        LOCATION: properties.get(LOCATION),
        ANTHOS_CLUSTER: properties.get(ANTHOS_CLUSTER),
        INSTANCE_ID: properties.get(INSTANCE_ID),
        VERSION: platform_version,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def _parse_poll_interval(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_POLL_INTERVAL_SECONDS
    try:
        interval = int(raw)
    except ValueError:
        logger.error(
            "Invalid %s %r, using %ds",
            WRITE_FREQUENCY_SECONDS,
            raw,
            DEFAULT_POLL_INTERVAL_SECONDS,
        )
        return DEFAULT_POLL_INTERVAL_SECONDS
    if interval < 1:
        logger.error(
            "%s must be positive, using %ds",
            WRITE_FREQUENCY_SECONDS,
            DEFAULT_POLL_INTERVAL_SECONDS,
        )
        return DEFAULT_POLL_INTERVAL_SECONDS
    return interval


def _default_transport_factory(project_id: str, endpoint: str | None) -> TransportPort:
    return CloudMonitoringTransport(project_id, endpoint=endpoint)


class CloudMonitoringWriter:
    """Maps samples onto backend time series and sends them in batches.

    Each write() covers the window from the previous successful export (the
    watermark) up to the current second. The watermark only advances once
    every batch of an invocation has been sent, so a failed window is
    retried on the next call; batches sent before the failure may then be
    delivered twice.

    Args:
        clock: Returns the current time in epoch seconds.
        transport_factory: Builds the transport from (project, endpoint).
        max_batch_size: Maximum records per backend request.
    """

    def __init__(
        self,
        clock: Clock = time.time,
        transport_factory: TransportFactory = _default_transport_factory,
        max_batch_size: int = MAX_TIMESERIES_PER_REQUEST,
    ) -> None:
        self._clock = clock
        self._transport_factory = transport_factory
        self._max_batch_size = max_batch_size
        self._watermark = Watermark()
        self._config = MappingConfig.EMPTY
        self._autofill_context: dict[str, str] = {}
        self._poll_interval_seconds = DEFAULT_POLL_INTERVAL_SECONDS
        self._transport: TransportPort | None = None
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def writer_id(self) -> str:
        return WRITER_NAME

    @property
    def watermark(self) -> int | None:
        """End of the last exported window, or None before the first export."""
        return self._watermark.get()

    @property
    def config(self) -> MappingConfig:
        return self._config

    @property
    def autofill_context(self) -> Mapping[str, str]:
        return dict(self._autofill_context)

    @property
    def poll_interval_seconds(self) -> int:
        return self._poll_interval_seconds

    def initialize(self, context: WriterContext) -> None:
        """Load the mapping, build the autofill context and the transport.

        Never raises. A bad mapping file leaves the writer without rules and
        a transport construction failure leaves it without a transport;
        either way every write() becomes a no-op. Calling initialize again
        has no effect.
        """
        with self._init_lock:
            if self._initialized:
                logger.debug("%s is already initialized", WRITER_NAME)
                return
            self._initialized = True

        properties = context.properties
        self._config = load_mapping_config(properties.get(CONFIG_FILE_PATH))
        self._poll_interval_seconds = _parse_poll_interval(
            properties.get(WRITE_FREQUENCY_SECONDS)
        )
        self._autofill_context = build_autofill_context(
            properties, context.platform_version
        )
        logger.debug("Populated autofill context %s", self._autofill_context)

        project = properties.get(PROJECT)
        if not project:
            logger.error("No %s configured, metrics will not be exported", PROJECT)
            return
        try:
            self._transport = self._transport_factory(
                project, properties.get(MONITORING_ENDPOINT)
            )
        except Exception:
            logger.exception(
                "Failed to create the monitoring transport, "
                "metrics will not be exported"
            )

    def initialize_with(
        self,
        config: MappingConfig,
        transport: TransportPort | None,
        autofill_context: Mapping[str, str] | None = None,
        poll_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize from already-built collaborators instead of properties."""
        with self._init_lock:
            if self._initialized:
                logger.debug("%s is already initialized", WRITER_NAME)
                return
            self._initialized = True
        self._config = config
        self._transport = transport
        self._autofill_context = dict(autofill_context or {})
        self._poll_interval_seconds = poll_interval_seconds

    def _ready(self, transport: TransportPort | None) -> bool:
        if transport is None:
            logger.debug("No transport available, skipping write")
            return False
        if not self._config:
            logger.debug("No metrics are mapped, skipping write")
            return False
        return True

    def translate(
        self, samples: Iterable[Sample], window_start: int, window_end: int
    ) -> list[OutputRecord]:
        """Map, aggregate and build the records for one window."""
        buckets = aggregate(self._config, samples, self._autofill_context)
        return build_records(buckets, window_start, window_end)

    def _send(
        self, transport: TransportPort, batches: Sequence[Sequence[OutputRecord]]
    ) -> None:
        for index, batch in enumerate(batches):
            try:
                transport.send(batch)
            except TransportError as e:
                e.batch_index = index
                raise
            except Exception as e:
                raise TransportError(
                    f"Transport failed on batch {index + 1} of {len(batches)}: {e}",
                    batch_index=index,
                ) from e

    def write(self, samples: Iterable[Sample]) -> bool:
        """Export the samples collected since the previous call.

        Never raises; failures are logged.

        Returns:
            True if the window was exported and the watermark advanced.
        """
        try:
            return self._write(samples)
        except Exception:
            logger.exception("Unexpected error while writing metrics")
            return False

    def _write(self, samples: Iterable[Sample]) -> bool:
        window_start, window_end = compute_window(
            self._clock(), self._watermark.get(), self._poll_interval_seconds
        )
        transport = self._transport
        if not self._ready(transport):
            return False

        records = self.translate(samples, window_start, window_end)
        batches = partition(records, self._max_batch_size)
        try:
            self._send(transport, batches)
        except TransportError as e:
            logger.error(
                "Failed to export window [%d, %d] (batch %s): %s",
                window_start,
                window_end,
                e.batch_index,
                e,
            )
            return False

        self._watermark.advance(window_end)
        logger.debug(
            "Exported %d record(s) in %d batch(es) for window [%d, %d]",
            len(records),
            len(batches),
            window_start,
            window_end,
        )
        return True

    def close(self) -> None:
        """Release the transport, if any."""
        if self._transport is None:
            return
        self._transport.close()
        self._transport = None
