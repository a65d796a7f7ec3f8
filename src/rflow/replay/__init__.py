"""Replay of stored NetFlow v5 captures."""

from rflow.replay.reader import CaptureReplayer

__all__ = ["CaptureReplayer"]
