"""NetFlow v5 decoder.

NetFlow v5 is a fixed-format protocol with a simple header and
fixed-size flow records. All fields are big-endian.

Header format (24 bytes):
  - version: 2 bytes (read, but always reported as 5)
  - count: 2 bytes (number of flows)
  - sys_uptime: 4 bytes (device uptime at export)
  - unix_secs: 4 bytes (current time)
  - unix_nsecs: 4 bytes (residual nanoseconds)
  - flow_sequence: 4 bytes (sequence counter)
  - engine_type: 1 byte
  - engine_id: 1 byte
  - sampling_interval: 2 bytes

Flow record format (48 bytes each):
  - src_addr: 4 bytes
  - dst_addr: 4 bytes
  - next_hop: 4 bytes
  - input: 2 bytes
  - output: 2 bytes
  - packets: 4 bytes
  - octets: 4 bytes
  - first: 4 bytes (uptime at start)
  - last: 4 bytes (uptime at end)
  - src_port: 2 bytes
  - pad1: 1 byte
  - dst_port: 2 bytes
  - tcp_flags: 1 byte
  - prot: 1 byte
  - tos: 1 byte
  - src_as: 2 bytes
  - dst_as: 2 bytes
  - src_mask: 1 byte
  - dst_mask: 1 byte
  - pad2: 2 bytes

Every decoder returns ``(value, rest)`` where ``rest`` is a view of the
unconsumed bytes, so concatenated packets can be decoded in sequence.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from ipaddress import IPv4Address
from typing import Any

from rflow.parsers.base import FlowParser, ProtocolType, TCPFlags, UptimeUnit
from rflow.parsers.primitives import Buffer, read_u8, read_u16, read_u32, skip

# NetFlow v5 constants
NETFLOW_V5_HEADER_SIZE = 24
NETFLOW_V5_RECORD_SIZE = 48
NETFLOW_V5_VERSION = 5

# Padding widths inside a flow record
FLOW_PAD1_SIZE = 1
FLOW_PAD2_SIZE = 2

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class V5Header:
    """NetFlow v5 packet header."""

    version: int
    count: int
    sys_uptime: int
    unix_secs: int
    unix_nsecs: int
    flow_sequence: int
    engine_type: int
    engine_id: int
    sampling_interval: int

    @classmethod
    def from_bytes(cls, data: Buffer) -> tuple["V5Header", memoryview]:
        return decode_header(data)

    @property
    def timestamp_ns(self) -> int:
        """Export time as integer nanoseconds since the Unix epoch."""
        return self.unix_secs * 1_000_000_000 + self.unix_nsecs

    @property
    def timestamp(self) -> datetime:
        """Export time as a UTC datetime.

        Anchor for the uptime-relative timestamps of every flow in the
        same packet. Truncated to microseconds; use ``timestamp_ns`` for
        the exact value.
        """
        return EPOCH + timedelta(
            seconds=self.unix_secs,
            microseconds=self.unix_nsecs // 1000,
        )

    @property
    def sampling_mode(self) -> int:
        """Sampling mode (upper 2 bits of sampling_interval)."""
        return (self.sampling_interval >> 14) & 0x03

    @property
    def sampling_rate(self) -> int:
        """Sampling rate (lower 14 bits of sampling_interval)."""
        return self.sampling_interval & 0x3FFF

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "count": self.count,
            "sys_uptime": self.sys_uptime,
            "unix_secs": self.unix_secs,
            "unix_nsecs": self.unix_nsecs,
            "flow_sequence": self.flow_sequence,
            "engine_type": self.engine_type,
            "engine_id": self.engine_id,
            "sampling_interval": self.sampling_interval,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class V5Flow:
    """NetFlow v5 flow record.

    ``first`` and ``last`` are device uptime readings and only carry
    meaning next to the ``sys_uptime`` of the header from the same
    packet. Use ``when`` to turn them into absolute times.
    """

    src_addr: IPv4Address
    dst_addr: IPv4Address
    next_hop: IPv4Address
    input_if: int
    output_if: int
    packets: int
    octets: int
    first: int
    last: int
    src_port: int
    dst_port: int
    tcp_flags: int
    protocol: int
    tos: int
    src_as: int
    dst_as: int
    src_mask: int
    dst_mask: int

    @classmethod
    def from_bytes(cls, data: Buffer) -> tuple["V5Flow", memoryview]:
        return decode_flow(data)

    def when(
        self,
        header: V5Header,
        unit: UptimeUnit | str = UptimeUnit.SECONDS,
    ) -> tuple[datetime, datetime]:
        """Compute the absolute start and end of this flow.

        Each time is the header timestamp shifted by the signed
        difference between the flow's uptime reading and the header's
        ``sys_uptime``. The result usually precedes the export time.

        Args:
            header: Header of the packet this flow was decoded from.
            unit: Unit of the uptime difference.

        Returns:
            Tuple of (start, end) as UTC datetimes.
        """
        unit = UptimeUnit(unit)
        return (
            header.timestamp + _uptime_delta(self.first - header.sys_uptime, unit),
            header.timestamp + _uptime_delta(self.last - header.sys_uptime, unit),
        )

    def when_ns(
        self,
        header: V5Header,
        unit: UptimeUnit | str = UptimeUnit.SECONDS,
    ) -> tuple[int, int]:
        """Same as ``when`` but as exact nanoseconds since the epoch."""
        scale = UptimeUnit(unit).nanoseconds
        base = header.timestamp_ns
        return (
            base + (self.first - header.sys_uptime) * scale,
            base + (self.last - header.sys_uptime) * scale,
        )

    @property
    def is_tcp(self) -> bool:
        """Check if this is a TCP flow."""
        return self.protocol == ProtocolType.TCP

    @property
    def is_udp(self) -> bool:
        """Check if this is a UDP flow."""
        return self.protocol == ProtocolType.UDP

    @property
    def is_icmp(self) -> bool:
        """Check if this is an ICMP flow."""
        return self.protocol in (ProtocolType.ICMP, ProtocolType.ICMPV6)

    @property
    def has_syn(self) -> bool:
        return self.is_tcp and bool(self.tcp_flags & TCPFlags.SYN)

    @property
    def has_fin(self) -> bool:
        return self.is_tcp and bool(self.tcp_flags & TCPFlags.FIN)

    @property
    def has_rst(self) -> bool:
        return self.is_tcp and bool(self.tcp_flags & TCPFlags.RST)

    def to_dict(self) -> dict[str, Any]:
        return {
            "src_addr": str(self.src_addr),
            "dst_addr": str(self.dst_addr),
            "next_hop": str(self.next_hop),
            "input_if": self.input_if,
            "output_if": self.output_if,
            "packets": self.packets,
            "octets": self.octets,
            "first": self.first,
            "last": self.last,
            "src_port": self.src_port,
            "dst_port": self.dst_port,
            "tcp_flags": self.tcp_flags,
            "protocol": self.protocol,
            "tos": self.tos,
            "src_as": self.src_as,
            "dst_as": self.dst_as,
            "src_mask": self.src_mask,
            "dst_mask": self.dst_mask,
        }


@dataclass(frozen=True, slots=True)
class V5Packet:
    """A decoded export packet: header plus its flows in wire order."""

    header: V5Header
    flows: tuple[V5Flow, ...]

    @classmethod
    def from_bytes(cls, data: Buffer) -> tuple["V5Packet", memoryview]:
        return decode_packet(data)

    def when(
        self,
        unit: UptimeUnit | str = UptimeUnit.SECONDS,
    ) -> Iterator[tuple[V5Flow, datetime, datetime]]:
        """Yield (flow, start, end) for every flow against this header."""
        for flow in self.flows:
            start, end = flow.when(self.header, unit)
            yield flow, start, end

    def to_dict(self, unit: UptimeUnit | str = UptimeUnit.SECONDS) -> dict[str, Any]:
        """Convert to dictionary, adding absolute flow start/end times."""
        flows = []
        for flow, start, end in self.when(unit):
            entry = flow.to_dict()
            entry["flow_start"] = start
            entry["flow_end"] = end
            flows.append(entry)
        return {
            "header": self.header.to_dict(),
            "flows": flows,
        }


def _uptime_delta(delta: int, unit: UptimeUnit) -> timedelta:
    if unit is UptimeUnit.MILLISECONDS:
        return timedelta(milliseconds=delta)
    return timedelta(seconds=delta)


def decode_header(data: Buffer) -> tuple[V5Header, memoryview]:
    """Decode the 24-byte packet header.

    The on-wire version is consumed but not trusted; the header always
    reports version 5.

    Args:
        data: Buffer starting at a packet header.

    Returns:
        Tuple of (header, remaining bytes).

    Raises:
        InsufficientBytesError: If the buffer ends inside the header.
    """
    _version, rest = read_u16(data)
    count, rest = read_u16(rest)
    sys_uptime, rest = read_u32(rest)
    unix_secs, rest = read_u32(rest)
    unix_nsecs, rest = read_u32(rest)
    flow_sequence, rest = read_u32(rest)
    engine_type, rest = read_u8(rest)
    engine_id, rest = read_u8(rest)
    sampling_interval, rest = read_u16(rest)

    header = V5Header(
        version=NETFLOW_V5_VERSION,
        count=count,
        sys_uptime=sys_uptime,
        unix_secs=unix_secs,
        unix_nsecs=unix_nsecs,
        flow_sequence=flow_sequence,
        engine_type=engine_type,
        engine_id=engine_id,
        sampling_interval=sampling_interval,
    )
    return header, rest


def decode_flow(data: Buffer) -> tuple[V5Flow, memoryview]:
    """Decode one 48-byte flow record, skipping both padding regions.

    Args:
        data: Buffer starting at a flow record.

    Returns:
        Tuple of (flow, bytes after the trailing padding).

    Raises:
        InsufficientBytesError: If the buffer ends inside the record.
    """
    src_addr, rest = read_u32(data)
    dst_addr, rest = read_u32(rest)
    next_hop, rest = read_u32(rest)
    input_if, rest = read_u16(rest)
    output_if, rest = read_u16(rest)
    packets, rest = read_u32(rest)
    octets, rest = read_u32(rest)
    first, rest = read_u32(rest)
    last, rest = read_u32(rest)
    src_port, rest = read_u16(rest)
    rest = skip(rest, FLOW_PAD1_SIZE)
    dst_port, rest = read_u16(rest)
    tcp_flags, rest = read_u8(rest)
    protocol, rest = read_u8(rest)
    tos, rest = read_u8(rest)
    src_as, rest = read_u16(rest)
    dst_as, rest = read_u16(rest)
    src_mask, rest = read_u8(rest)
    dst_mask, rest = read_u8(rest)
    rest = skip(rest, FLOW_PAD2_SIZE)

    flow = V5Flow(
        src_addr=IPv4Address(src_addr),
        dst_addr=IPv4Address(dst_addr),
        next_hop=IPv4Address(next_hop),
        input_if=input_if,
        output_if=output_if,
        packets=packets,
        octets=octets,
        first=first,
        last=last,
        src_port=src_port,
        dst_port=dst_port,
        tcp_flags=tcp_flags,
        protocol=protocol,
        tos=tos,
        src_as=src_as,
        dst_as=dst_as,
        src_mask=src_mask,
        dst_mask=dst_mask,
    )
    return flow, rest


def decode_packet(data: Buffer) -> tuple[V5Packet, memoryview]:
    """Decode a header followed by exactly ``count`` flow records.

    Bytes after the last record are returned untouched so the caller
    can decode the next packet from them.

    Raises:
        InsufficientBytesError: If the header or any record is short.
            Nothing is returned for a partially decoded packet.
    """
    header, rest = decode_header(data)
    flows = []
    for _ in range(header.count):
        flow, rest = decode_flow(rest)
        flows.append(flow)
    return V5Packet(header=header, flows=tuple(flows)), rest


def iter_packets(data: Buffer) -> Iterator[V5Packet]:
    """Yield every packet from a buffer of concatenated packets.

    A decode error stops iteration and propagates; packets already
    yielded remain valid.
    """
    return NetFlowV5Parser().iter_parse(data)


class NetFlowV5Parser(FlowParser[V5Packet]):
    """Parser for NetFlow version 5 packets."""

    @property
    def protocol_name(self) -> str:
        return "netflow_v5"

    def parse(self, data: Buffer) -> tuple[V5Packet, memoryview]:
        """Parse one NetFlow v5 packet from the front of ``data``.

        Args:
            data: Buffer holding one or more concatenated packets.

        Returns:
            Tuple of (packet, unconsumed remainder).

        Raises:
            InsufficientBytesError: If the packet is truncated.
        """
        return decode_packet(data)
