"""
worker.py
---------
Background scan worker and the state it shares with the coordinator.

One worker thread runs per scan. It calls the scanner, parses the output and
hands exactly one ScanResult to the coordinator through a single-use queue,
on success and on failure alike.

Author: Jason A. Cox
17 October 2026
"""
import queue
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ScanError
from .records import WirelessNetwork, parse_output

IDLE = "idle"
SCANNING = "scanning"
DELIVERED = "delivered"


@dataclass(frozen=True)
class ScanResult:
    """The single message a worker delivers."""
    networks: Tuple[WirelessNetwork, ...] = ()
    skipped: int = 0
    error: Optional[str] = None


class ScanState:
    """
    Status shared between the coordinator and its worker.

    `status` is only read or written while holding `lock`, and the lock is
    never held across the scan command itself.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.status = IDLE


def new_channel():
    """A fresh one-shot delivery channel, one per scan."""
    return queue.Queue(maxsize=1)


def _collect(scanner):
    try:
        output = scanner()
    except ScanError as e:
        return ScanResult(error=str(e))
    networks, skipped = parse_output(output)
    return ScanResult(networks=tuple(networks), skipped=skipped)


def _run(state, channel, scanner):
    try:
        result = _collect(scanner)
    except Exception as e:
        result = ScanResult(error=f"scan failed: {e!r}")
    # Queued before the status reads DELIVERED.
    channel.put_nowait(result)
    with state.lock:
        state.status = DELIVERED


def start_scan(state, channel, scanner):
    """
    Spawn the worker thread for one scan.

    The caller must already have set state.status to SCANNING while holding
    state.lock, so a second trigger cannot slip in before the thread starts.

    Args:
        state (ScanState): Shared status.
        channel (queue.Queue): Single-use channel created for this scan.
        scanner (Callable[[], str]): Returns raw scan output, may raise ScanError.
    Returns:
        threading.Thread: The started daemon thread.
    """
    thread = threading.Thread(target=_run, args=(state, channel, scanner),
                              name="wifipanel-scan", daemon=True)
    thread.start()
    return thread
