"""Flow protocol parsers.

Supports:
- NetFlow v5 (fixed format)
"""

from rflow.parsers.base import FlowParser, ProtocolType, TCPFlags, UptimeUnit
from rflow.parsers.netflow_v5 import NetFlowV5Parser, V5Flow, V5Header, V5Packet

__all__ = [
    "FlowParser",
    "ProtocolType",
    "TCPFlags",
    "UptimeUnit",
    "NetFlowV5Parser",
    "V5Flow",
    "V5Header",
    "V5Packet",
]
