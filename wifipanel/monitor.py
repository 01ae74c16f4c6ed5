"""
monitor.py
----------
Terminal tick loop driving the asynchronous scan.

Features:
- wait_for_scan(): trigger a scan and poll it every tick, drawing a spinner,
  until the results are merged.
- watch(): rescan on an interval and print the table after each scan.

Author: Jason A. Cox
17 October 2026
"""
import sys
import time

from colorama import Fore, Style

from .panel import SPINNER
from .scan import print_table


def wait_for_scan(coordinator, tick=0.1, out=None):
    """
    Trigger a scan (no-op if one is running) and tick until it is merged.
    Args:
        coordinator (ScanCoordinator): Scan state to drive.
        tick (float): Seconds between polls.
        out: Stream for the spinner, defaults to sys.stdout.
    Returns:
        int: Number of ticks spent waiting.
    """
    out = out or sys.stdout
    coordinator.trigger_scan()
    ticks = 0
    while True:
        coordinator.poll()
        if not coordinator.is_scanning():
            break
        out.write(f"\r{Fore.YELLOW}{SPINNER[ticks % len(SPINNER)]} Scanning for WiFi networks...{Style.RESET_ALL}")
        out.flush()
        ticks += 1
        time.sleep(tick)
    if ticks:
        out.write("\r" + " " * 40 + "\r")
        out.flush()
    return ticks


def watch(panel, interval=10, count=5, tick=0.1):
    """
    Rescan every interval seconds, printing the results count times.
    Args:
        panel (NetworkPanel): Initialised panel.
        interval (float): Seconds between the start of consecutive scans.
        count (int): Number of scans to show.
        tick (float): Poll cadence while a scan runs.
    """
    coordinator = panel.coordinator
    print(f"{Fore.YELLOW}Watching WiFi networks ({count} scans, {interval}s interval)...{Style.RESET_ALL}")
    for i in range(count):
        started = time.monotonic()
        wait_for_scan(coordinator, tick=tick)
        results = coordinator.current_results()
        print(f"{Fore.CYAN}Scan {i + 1}/{count}: {len(results)} networks{Style.RESET_ALL}")
        print_table(results, panel.known_networks, coordinator.selection())
        if coordinator.last_error:
            print(f"{Fore.RED}Error scanning WiFi: {coordinator.last_error}{Style.RESET_ALL}")
        print()
        if i < count - 1:
            time.sleep(max(0, interval - (time.monotonic() - started)))
