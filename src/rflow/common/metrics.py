"""Prometheus metrics for rflow.

Decoding itself is pure; these counters are updated by the replay layer.
"""

from prometheus_client import Counter

PACKETS_DECODED = Counter(
    "rflow_packets_decoded_total",
    "Total number of NetFlow v5 packets decoded",
)

FLOWS_DECODED = Counter(
    "rflow_flows_decoded_total",
    "Total number of NetFlow v5 flow records decoded",
)

DECODE_ERRORS = Counter(
    "rflow_decode_errors_total",
    "Total number of packet decode failures",
    ["error_type"],
)

CAPTURE_BYTES_READ = Counter(
    "rflow_capture_bytes_read_total",
    "Total number of bytes read from capture files",
)
