"""
coordinator.py
--------------
UI-facing side of the asynchronous WiFi scan.

ScanCoordinator owns the cached results, the shared scan status and the
receiving end of the current scan's channel. Every method is safe to call on
each UI tick: none of them waits for the worker or for a contended lock.

Author: Jason A. Cox
17 October 2026
"""
import queue

from .scan import run_scan
from .worker import DELIVERED, IDLE, SCANNING, ScanState, new_channel, start_scan


class ScanCoordinator:
    """
    Idle/Scanning state machine around one background scan at a time.

    Args:
        scanner (Callable[[], str]): Returns raw nmcli output; defaults to scan.run_scan.
    """

    def __init__(self, scanner=run_scan):
        self._scanner = scanner
        self._state = ScanState()
        self._channel = None
        self._results = ()
        self._selection = None
        self.last_error = None
        self.last_skipped = 0

    def trigger_scan(self):
        """
        Start a scan unless one is already running. Never blocks.
        Returns:
            bool: True if a worker was started, False if this was a no-op.
        """
        if not self._state.lock.acquire(blocking=False):
            return False
        try:
            if self._state.status != IDLE:
                return False
            self._state.status = SCANNING
            self._channel = new_channel()
            channel = self._channel
        finally:
            self._state.lock.release()
        try:
            start_scan(self._state, channel, self._scanner)
        except RuntimeError as e:
            with self._state.lock:
                self._state.status = IDLE
                self._channel = None
            self.last_error = f"could not start scan: {e}"
            return False
        return True

    def poll(self):
        """Merge a finished scan into the cached results, if one is waiting."""
        if not self._state.lock.acquire(blocking=False):
            return
        try:
            if self._state.status != DELIVERED:
                return
            try:
                result = self._channel.get_nowait()
            except queue.Empty:
                return
            self._channel = None
            self._state.status = IDLE
        finally:
            self._state.lock.release()

        self.last_skipped = result.skipped
        self.last_error = result.error
        if result.error is None:
            self._results = result.networks

    def is_scanning(self):
        """True from trigger_scan() until poll() has merged the result."""
        if not self._state.lock.acquire(blocking=False):
            return True
        try:
            return self._state.status != IDLE
        finally:
            self._state.lock.release()

    def current_results(self):
        """Snapshot of the latest merged scan, in scan order."""
        return self._results

    def set_selection(self, network_id):
        self._selection = network_id

    def selection(self):
        return self._selection

    def selected_network(self):
        """
        The current result matching the selection, or None if the selection
        is unset or was made against an older result set.
        """
        if self._selection is None:
            return None
        for net in self._results:
            if net.id == self._selection:
                return net
        return None
