"""Parser interface and shared protocol constants."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from enum import Enum, IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ProtocolType(IntEnum):
    """IP protocol numbers."""

    ICMP = 1
    TCP = 6
    UDP = 17
    GRE = 47
    ESP = 50
    AH = 51
    ICMPV6 = 58
    SCTP = 132


class TCPFlags(IntEnum):
    """TCP flag bits."""

    FIN = 0x01
    SYN = 0x02
    RST = 0x04
    PSH = 0x08
    ACK = 0x10
    URG = 0x20
    ECE = 0x40
    CWR = 0x80


class UptimeUnit(str, Enum):
    """Unit applied to the difference between two uptime readings.

    Exporters disagree on the resolution of the uptime fields, so the
    unit is chosen by the caller rather than assumed.
    """

    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"

    @property
    def nanoseconds(self) -> int:
        """Nanoseconds per unit."""
        if self is UptimeUnit.MILLISECONDS:
            return 1_000_000
        return 1_000_000_000


class FlowParser(ABC, Generic[T]):
    """Abstract base class for flow protocol parsers."""

    @property
    @abstractmethod
    def protocol_name(self) -> str:
        """Return the protocol name (e.g., 'netflow_v5')."""
        ...

    @abstractmethod
    def parse(self, data: bytes | bytearray | memoryview) -> tuple[T, memoryview]:
        """Parse one packet from the front of a buffer.

        Args:
            data: Buffer holding one or more concatenated packets.

        Returns:
            Tuple of (decoded packet, unconsumed remainder).

        Raises:
            DecodeError: If data is malformed.
        """
        ...

    def iter_parse(self, data: bytes | bytearray | memoryview) -> Iterator[T]:
        """Yield packets from a buffer of concatenated packets.

        Stops at the first decode error, which propagates to the caller.
        """
        rest = memoryview(data)
        while len(rest) > 0:
            packet, rest = self.parse(rest)
            yield packet

    def parse_all(self, data: bytes | bytearray | memoryview) -> list[T]:
        """Parse every packet in a buffer of concatenated packets."""
        return list(self.iter_parse(data))
