"""rflow - NetFlow v5 export packet decoder.

Decodes raw NetFlow v5 export packets into typed header and flow
records, deriving absolute flow timestamps from device uptime.
"""

from rflow.parsers.netflow_v5 import (
    V5Flow,
    V5Header,
    V5Packet,
    decode_flow,
    decode_header,
    decode_packet,
    iter_packets,
)

__version__ = "0.1.0"

__all__ = [
    "V5Flow",
    "V5Header",
    "V5Packet",
    "decode_flow",
    "decode_header",
    "decode_packet",
    "iter_packets",
]
