import threading
import time

import pytest

from wifipanel.coordinator import ScanCoordinator
from wifipanel.errors import ScanError

SAMPLE = "\n".join([
    "*:AA\\:BB\\:CC\\:DD\\:EE\\:01:HomeNet:Infra:6:130 Mbit/s:82:▂▄▆█:WPA2",
    " :AA\\:BB\\:CC\\:DD\\:EE\\:02::Infra:11:54 Mbit/s:40:▂▄__:WPA2",
    " :AA\\:BB\\:CC\\:DD\\:EE\\:03:Neighbour:Infra:36:270 Mbit/s:35:▂___:WPA1 WPA2",
])


class GatedScanner:
    """Blocks in the worker thread until released, counting calls."""

    def __init__(self, outputs=(SAMPLE,)):
        self.outputs = list(outputs)
        self.calls = 0
        self.running = 0
        self.max_running = 0
        self.started = threading.Event()
        self.release = threading.Event()
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
            self.running += 1
            self.max_running = max(self.max_running, self.running)
        self.started.set()
        self.release.wait(5)
        with self._lock:
            self.running -= 1
        output = self.outputs[min(self.calls, len(self.outputs)) - 1]
        if isinstance(output, Exception):
            raise output
        return output


def wait_idle(coordinator, timeout=5):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        coordinator.poll()
        if not coordinator.is_scanning():
            return
        time.sleep(0.01)
    pytest.fail("scan did not finish")


def test_initial_state_is_idle():
    coordinator = ScanCoordinator(scanner=GatedScanner())
    assert not coordinator.is_scanning()
    assert coordinator.current_results() == ()
    assert coordinator.selection() is None
    coordinator.poll()
    assert coordinator.current_results() == ()


def test_trigger_returns_immediately_and_poll_merges():
    scanner = GatedScanner()
    coordinator = ScanCoordinator(scanner=scanner)

    started = time.monotonic()
    assert coordinator.trigger_scan()
    assert time.monotonic() - started < 1
    assert coordinator.is_scanning()
    assert scanner.started.wait(5)

    coordinator.poll()
    assert coordinator.is_scanning()
    assert coordinator.current_results() == ()

    scanner.release.set()
    wait_idle(coordinator)
    results = coordinator.current_results()
    assert [n.id for n in results] == [0, 1]
    assert results[0].ssid == "HomeNet (*)"
    assert results[0].bssid == "AA:BB:CC:DD:EE:01"
    assert results[1].ssid == "Neighbour"
    assert coordinator.last_error is None
    assert coordinator.last_skipped == 0


def test_retrigger_while_scanning_is_noop():
    scanner = GatedScanner()
    coordinator = ScanCoordinator(scanner=scanner)

    assert coordinator.trigger_scan()
    assert scanner.started.wait(5)
    for _ in range(10):
        assert not coordinator.trigger_scan()
        coordinator.poll()

    scanner.release.set()
    wait_idle(coordinator)
    assert scanner.calls == 1
    assert scanner.max_running == 1

    merged = coordinator.current_results()
    coordinator.poll()
    assert coordinator.current_results() is merged


def test_can_rescan_after_idle():
    scanner = GatedScanner(outputs=(SAMPLE, SAMPLE.splitlines()[2]))
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)

    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert len(coordinator.current_results()) == 2

    assert coordinator.trigger_scan()
    wait_idle(coordinator)
    assert scanner.calls == 2
    assert [(n.id, n.ssid) for n in coordinator.current_results()] == [(0, "Neighbour")]


def test_results_replaced_whole():
    scanner = GatedScanner(outputs=(SAMPLE, SAMPLE.splitlines()[2]))
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)
    coordinator.trigger_scan()
    wait_idle(coordinator)
    first = coordinator.current_results()
    first_ids = [n.bssid for n in first]

    scanner.release.clear()
    coordinator.trigger_scan()
    assert scanner.started.wait(5)
    # Old snapshot stays intact while the second scan runs and after it merges
    assert coordinator.current_results() is first
    scanner.release.set()
    wait_idle(coordinator)
    second = coordinator.current_results()
    assert [n.bssid for n in first] == first_ids
    assert [n.bssid for n in second] == ["AA:BB:CC:DD:EE:03"]
    assert isinstance(second, tuple)


def test_poll_does_not_block_when_lock_held():
    scanner = GatedScanner()
    coordinator = ScanCoordinator(scanner=scanner)
    coordinator.trigger_scan()
    assert scanner.started.wait(5)
    scanner.release.set()

    lock = coordinator._state.lock
    # Let the worker finish first so it does not wait on the lock we take
    deadline = time.monotonic() + 5
    while coordinator._channel.empty() and time.monotonic() < deadline:
        time.sleep(0.01)
    time.sleep(0.05)

    assert lock.acquire(timeout=5)
    try:
        started = time.monotonic()
        coordinator.poll()
        assert coordinator.is_scanning()
        assert not coordinator.trigger_scan()
        assert time.monotonic() - started < 0.5
        assert coordinator.current_results() == ()
    finally:
        lock.release()

    wait_idle(coordinator)
    assert len(coordinator.current_results()) == 2


def test_scan_error_returns_to_idle_with_results_unchanged():
    scanner = GatedScanner(outputs=(SAMPLE, ScanError("nmcli failed: not found")))
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)
    coordinator.trigger_scan()
    wait_idle(coordinator)
    before = coordinator.current_results()

    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert not coordinator.is_scanning()
    assert coordinator.current_results() is before
    assert "not found" in coordinator.last_error

    # A later good scan clears the diagnostic
    scanner.outputs.append(SAMPLE)
    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert coordinator.last_error is None


def test_unexpected_worker_failure_still_returns_to_idle():
    def broken():
        raise RuntimeError("boom")

    coordinator = ScanCoordinator(scanner=broken)
    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert "boom" in coordinator.last_error
    assert coordinator.current_results() == ()


def test_skipped_lines_are_reported():
    scanner = GatedScanner(outputs=(SAMPLE + "\nnot a scan line\n",))
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)
    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert coordinator.last_skipped == 1
    assert len(coordinator.current_results()) == 2


def test_selection_is_plain_assignment():
    scanner = GatedScanner()
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)
    coordinator.set_selection(1)
    assert coordinator.selection() == 1
    assert coordinator.selected_network() is None

    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert coordinator.selected_network().ssid == "Neighbour"

    coordinator.set_selection(3)
    assert coordinator.selection() == 3
    assert coordinator.selected_network() is None


def test_scan_with_bad_numeric_line_keeps_good_records():
    bad = " :AA\\:BB\\:CC\\:DD\\:EE\\:09:Odd:Infra:²:54 Mbit/s:50:▂▄__:WPA2"
    scanner = GatedScanner(outputs=(SAMPLE + "\n" + bad,))
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)
    coordinator.trigger_scan()
    wait_idle(coordinator)
    assert coordinator.last_error is None
    assert coordinator.last_skipped == 1
    assert [n.ssid for n in coordinator.current_results()] == ["HomeNet (*)", "Neighbour"]


def test_thread_start_failure_returns_to_idle(monkeypatch):
    scanner = GatedScanner()
    scanner.release.set()
    coordinator = ScanCoordinator(scanner=scanner)

    def refuse(self):
        raise RuntimeError("can't start new thread")
    monkeypatch.setattr(threading.Thread, 'start', refuse)

    assert not coordinator.trigger_scan()
    assert not coordinator.is_scanning()
    assert "can't start new thread" in coordinator.last_error
    assert coordinator._channel is None

    monkeypatch.undo()
    assert coordinator.trigger_scan()
    wait_idle(coordinator)
    assert scanner.calls == 1
    assert coordinator.last_error is None
    assert len(coordinator.current_results()) == 2
