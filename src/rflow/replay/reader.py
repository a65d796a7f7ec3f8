"""Capture replay.

Reads a capture of raw NetFlow v5 packets, stored back to back exactly
as they were received, and decodes them in sequence.
"""

from collections.abc import Iterator
from pathlib import Path

from rflow.common.config import ReplaySettings, get_settings
from rflow.common.exceptions import CaptureError, DecodeError
from rflow.common.logging import get_logger
from rflow.common.metrics import (
    CAPTURE_BYTES_READ,
    DECODE_ERRORS,
    FLOWS_DECODED,
    PACKETS_DECODED,
)
from rflow.parsers.netflow_v5 import NetFlowV5Parser, V5Packet

logger = get_logger(__name__)


class CaptureReplayer:
    """Decodes the packets stored in a capture file.

    At most ``max_capture_bytes`` are read from the file. A decode
    failure is fatal for the capture: it is logged, counted and
    re-raised, and no further packets are produced.
    """

    def __init__(
        self,
        settings: ReplaySettings | None = None,
        parser: NetFlowV5Parser | None = None,
    ) -> None:
        """Initialize replayer.

        Args:
            settings: Replay settings.
            parser: Packet parser. Creates NetFlowV5Parser if not provided.
        """
        self._settings = settings or get_settings().replay
        self._parser = parser or NetFlowV5Parser()

    def read(self, path: str | Path) -> bytes:
        """Read the bounded contents of a capture file.

        Args:
            path: Capture file location.

        Returns:
            Up to ``max_capture_bytes`` bytes from the start of the file.

        Raises:
            CaptureError: If the file cannot be opened or read.
        """
        limit = self._settings.max_capture_bytes
        try:
            with open(path, "rb") as f:
                data = f.read(limit + 1)
        except OSError as e:
            raise CaptureError(
                f"failed to read capture {path}: {e.strerror or e}",
                details={"path": str(path)},
                cause=e,
            ) from e

        if len(data) > limit:
            logger.warning(
                "Capture larger than read limit, truncating",
                path=str(path),
                limit=limit,
            )
            data = data[:limit]

        CAPTURE_BYTES_READ.inc(len(data))
        logger.debug("Read capture", path=str(path), size=len(data))
        return data

    def replay(self, path: str | Path) -> Iterator[V5Packet]:
        """Yield every packet decoded from a capture file.

        Raises:
            CaptureError: If the file cannot be read.
            DecodeError: If a packet is truncated.
        """
        data = self.read(path)
        yield from self.decode(data, source=str(path))

    def decode(self, data: bytes, source: str = "<buffer>") -> Iterator[V5Packet]:
        """Yield every packet decoded from an in-memory capture."""
        decoded = 0
        try:
            for packet in self._parser.iter_parse(data):
                decoded += 1
                PACKETS_DECODED.inc()
                FLOWS_DECODED.inc(len(packet.flows))
                yield packet
        except DecodeError as e:
            DECODE_ERRORS.labels(error_type=type(e).__name__).inc()
            logger.error(
                "Failed to decode packet",
                source=source,
                protocol=self._parser.protocol_name,
                packet_index=decoded,
                error=str(e),
            )
            raise

        logger.info(
            "Capture replayed",
            source=source,
            protocol=self._parser.protocol_name,
            packets=decoded,
        )
