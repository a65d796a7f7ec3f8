"""Capture dump entry point.

Decodes a stored NetFlow v5 capture and prints every packet.

Usage:
    rflow-dump recorded.netflow
    rflow-dump recorded.netflow --format json --uptime-unit milliseconds
"""

import argparse
import json
import sys
from typing import NoReturn

from rflow.common.config import get_settings
from rflow.common.exceptions import RFlowError
from rflow.common.logging import bind_context, get_logger, setup_logging
from rflow.parsers.base import UptimeUnit
from rflow.parsers.netflow_v5 import V5Packet
from rflow.replay.reader import CaptureReplayer

logger = get_logger(__name__)


def format_text(index: int, packet: V5Packet, unit: UptimeUnit) -> str:
    """Render a packet as human-readable lines."""
    header = packet.header
    lines = [
        f"packet {index}: version={header.version} count={header.count} "
        f"sequence={header.flow_sequence} uptime={header.sys_uptime} "
        f"engine={header.engine_type}/{header.engine_id} "
        f"sampling={header.sampling_interval} "
        f"exported={header.timestamp.isoformat()}"
    ]
    for flow, start, end in packet.when(unit):
        lines.append(
            f"  {flow.src_addr}:{flow.src_port} -> {flow.dst_addr}:{flow.dst_port} "
            f"via {flow.next_hop} proto={flow.protocol} tos={flow.tos} "
            f"flags=0x{flow.tcp_flags:02x} packets={flow.packets} octets={flow.octets} "
            f"if={flow.input_if}/{flow.output_if} as={flow.src_as}/{flow.dst_as} "
            f"mask={flow.src_mask}/{flow.dst_mask} "
            f"start={start.isoformat()} end={end.isoformat()}"
        )
    return "\n".join(lines)


def format_json(index: int, packet: V5Packet, unit: UptimeUnit) -> str:
    """Render a packet as a single JSON line."""
    return json.dumps({"index": index, **packet.to_dict(unit)}, default=str)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rflow-dump",
        description="Decode and print the NetFlow v5 packets stored in a capture file",
    )
    parser.add_argument("capture", help="Path to a capture of concatenated packets")
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        help="Output format (default: from REPLAY_OUTPUT_FORMAT, else text)",
    )
    parser.add_argument(
        "--uptime-unit",
        choices=[unit.value for unit in UptimeUnit],
        help="Unit of flow uptime deltas (default: seconds)",
    )
    parser.add_argument(
        "--max-bytes",
        type=int,
        help="Maximum bytes read from the capture (default: 2048)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the dump command.

    Returns:
        Process exit status: 0 on success, 1 on any rflow error.
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()

    # Override settings with CLI args
    logging_settings = settings.logging
    if args.log_level:
        logging_settings = logging_settings.model_copy(update={"level": args.log_level})
    setup_logging(logging_settings)

    replay_updates: dict[str, object] = {}
    if args.format:
        replay_updates["output_format"] = args.format
    if args.uptime_unit:
        replay_updates["uptime_unit"] = args.uptime_unit
    if args.max_bytes is not None:
        replay_updates["max_capture_bytes"] = args.max_bytes
    try:
        replay_settings = settings.replay.model_validate(
            {**settings.replay.model_dump(), **replay_updates}
        )
    except ValueError as e:
        print(f"Error: invalid option: {e}", file=sys.stderr)
        return 2

    bind_context(capture=args.capture)
    unit = UptimeUnit(replay_settings.uptime_unit)
    render = format_json if replay_settings.output_format == "json" else format_text

    logger.info(
        "Replaying capture",
        max_bytes=replay_settings.max_capture_bytes,
        uptime_unit=unit.value,
        output_format=replay_settings.output_format,
    )

    replayer = CaptureReplayer(replay_settings)
    try:
        for index, packet in enumerate(replayer.replay(args.capture)):
            print(render(index, packet, unit))
    except RFlowError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    return 0


def run() -> NoReturn:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
