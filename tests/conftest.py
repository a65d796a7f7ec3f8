"""Pytest configuration and fixtures for rflow tests."""

import struct
from collections.abc import Callable
from ipaddress import IPv4Address

import pytest

from rflow.parsers.netflow_v5 import V5Flow, V5Header

# Wire layouts, padding included ("x")
HEADER_FORMAT = "!HHIIIIBBH"
FLOW_FORMAT = "!IIIHHIIIIHxHBBBHHBBxx"


# =============================================================================
# Wire Builders
# =============================================================================


@pytest.fixture
def make_header() -> Callable[..., bytes]:
    """Factory for 24-byte NetFlow v5 headers."""

    def _make(
        count: int = 1,
        sys_uptime: int = 1000000,
        unix_secs: int = 1700000000,
        unix_nsecs: int = 0,
        flow_sequence: int = 1,
        engine_type: int = 0,
        engine_id: int = 0,
        sampling_interval: int = 0,
        version: int = 5,
    ) -> bytes:
        return struct.pack(
            HEADER_FORMAT,
            version,
            count,
            sys_uptime,
            unix_secs,
            unix_nsecs,
            flow_sequence,
            engine_type,
            engine_id,
            sampling_interval,
        )

    return _make


@pytest.fixture
def make_flow() -> Callable[..., bytes]:
    """Factory for 48-byte NetFlow v5 flow records."""

    def _make(
        src_addr: str = "192.168.1.100",
        dst_addr: str = "10.0.0.1",
        next_hop: str = "0.0.0.0",
        input_if: int = 1,
        output_if: int = 2,
        packets: int = 100,
        octets: int = 50000,
        first: int = 900000,
        last: int = 999000,
        src_port: int = 54321,
        dst_port: int = 443,
        tcp_flags: int = 0x18,  # PSH+ACK
        protocol: int = 6,
        tos: int = 0,
        src_as: int = 0,
        dst_as: int = 0,
        src_mask: int = 24,
        dst_mask: int = 24,
    ) -> bytes:
        return struct.pack(
            FLOW_FORMAT,
            int(IPv4Address(src_addr)),
            int(IPv4Address(dst_addr)),
            int(IPv4Address(next_hop)),
            input_if,
            output_if,
            packets,
            octets,
            first,
            last,
            src_port,
            dst_port,
            tcp_flags,
            protocol,
            tos,
            src_as,
            dst_as,
            src_mask,
            dst_mask,
        )

    return _make


# =============================================================================
# Reference Vectors
# =============================================================================


@pytest.fixture
def v5_header_bytes() -> bytes:
    """Header with count=2, sys_uptime=4, unix_secs=16, unix_nsecs=17."""
    return bytes([
        0x00, 0x05,              # version
        0x00, 0x02,              # count
        0x00, 0x00, 0x00, 0x04,  # sys_uptime
        0x00, 0x00, 0x00, 0x10,  # unix_secs
        0x00, 0x00, 0x00, 0x11,  # unix_nsecs
        0x00, 0x00, 0x00, 0x12,  # flow_sequence
        0x20,                    # engine_type
        0x44,                    # engine_id
        0x00, 0x10,              # sampling_interval
    ])


@pytest.fixture
def v5_header() -> V5Header:
    """Decoded form of v5_header_bytes."""
    return V5Header(
        version=5,
        count=2,
        sys_uptime=4,
        unix_secs=16,
        unix_nsecs=17,
        flow_sequence=18,
        engine_type=32,
        engine_id=68,
        sampling_interval=16,
    )


@pytest.fixture
def v5_flow_bytes() -> bytes:
    """Flow record with first=16, last=26."""
    return bytes([
        0xC0, 0xA8, 0x01, 0x2A,  # src_addr
        0xC0, 0xA8, 0x01, 0x2C,  # dst_addr
        0xC0, 0xA8, 0x01, 0x2E,  # next_hop
        0x00, 0x08,              # input
        0x00, 0x10,              # output
        0x00, 0x00, 0x00, 0x28,  # packets
        0x00, 0x00, 0xA1, 0xF3,  # octets
        0x00, 0x00, 0x00, 0x10,  # first
        0x00, 0x00, 0x00, 0x1A,  # last
        0x00, 0x35,              # src_port
        0xEE,                    # pad1
        0x5B, 0x73,              # dst_port
        0x00,                    # tcp_flags
        0x11,                    # protocol
        0x01,                    # tos
        0xFC, 0x00,              # src_as
        0xFC, 0x00,              # dst_as
        0xFF,                    # src_mask
        0xFF,                    # dst_mask
        0xEE, 0xEE,              # pad2
    ])


@pytest.fixture
def v5_flow() -> V5Flow:
    """Decoded form of v5_flow_bytes."""
    return V5Flow(
        src_addr=IPv4Address("192.168.1.42"),
        dst_addr=IPv4Address("192.168.1.44"),
        next_hop=IPv4Address("192.168.1.46"),
        input_if=8,
        output_if=16,
        packets=40,
        octets=41459,
        first=16,
        last=26,
        src_port=53,
        dst_port=23411,
        tcp_flags=0x00,
        protocol=17,
        tos=1,
        src_as=64512,
        dst_as=64512,
        src_mask=255,
        dst_mask=255,
    )


@pytest.fixture
def softflowd_packet() -> bytes:
    """Export from softflowd: two ICMP ping flows and one mDNS flow.

    Every flow's first/last precede the header's sys_uptime.
    """
    return bytes([
        0x00, 0x05, 0x00, 0x03, 0x00, 0x03, 0x79, 0xA3, 0x5E, 0x80, 0xC5, 0x86, 0x22, 0xA5,
        0x5A, 0xB0, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0xAC, 0x11, 0x00, 0x02,
        0xAC, 0x11, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x0A, 0x00, 0x00, 0x03, 0x48, 0x00, 0x00, 0x2F, 0x4C, 0x00, 0x00, 0x52, 0x76,
        0x00, 0x00, 0x08, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0xAC, 0x11, 0x00, 0x01, 0xAC, 0x11, 0x00, 0x02, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x0A, 0x00, 0x00, 0x03, 0x48, 0x00, 0x00,
        0x2F, 0x4C, 0x00, 0x00, 0x52, 0x76, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x01, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0xAC, 0x11, 0x00, 0x01, 0xE0, 0x00,
        0x00, 0xFB, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x01,
        0x00, 0x00, 0x00, 0xA9, 0x00, 0x00, 0xE0, 0x1C, 0x00, 0x00, 0xE0, 0x1C, 0x14, 0xE9,
        0x14, 0xE9, 0x00, 0x00, 0x11, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    ])


@pytest.fixture
def sample_netflow_v5_packet(make_header, make_flow) -> bytes:
    """Single-flow NetFlow v5 packet built from default field values."""
    return make_header(count=1) + make_flow()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
