"""
cli.py
-----
Command-line interface for wifipanel.

Features:
- scan: Scan for WiFi networks in the background and display a colorized table.
- watch: Rescan on an interval.
- devices / known: Show network interfaces and saved connections.
- connect: Scan, select a network by id and apply it.
- Uses argparse for flexible command parsing and help output.

Author: Jason A. Cox
17 October 2026
"""
import argparse
import sys

from colorama import Fore, Style

from .coordinator import ScanCoordinator
from .errors import ScanError
from .monitor import wait_for_scan, watch
from .panel import NetworkPanel
from .scan import list_devices, list_known_networks, print_devices, print_table


def _known_or_empty():
    try:
        return list_known_networks()
    except ScanError as e:
        print(f"{Fore.RED}Error listing known networks: {e}{Style.RESET_ALL}")
        return frozenset()


def cmd_scan(args):
    print(f"{Fore.YELLOW}Scanning for WiFi networks...{Style.RESET_ALL}")
    coordinator = ScanCoordinator()
    known = _known_or_empty()
    wait_for_scan(coordinator, tick=args.tick)
    if coordinator.last_error:
        print(f"{Fore.RED}Error scanning WiFi: {coordinator.last_error}{Style.RESET_ALL}")
        return 1
    results = coordinator.current_results()
    print(f"{Fore.GREEN}Found {len(results)} networks.{Style.RESET_ALL}")
    current = next((net for net in results if net.associated), None)
    if current:
        print(f"{Fore.CYAN}Current connected SSID: {current.name} (Channel: {current.channel}, BSSID: {current.bssid}){Style.RESET_ALL}")
    else:
        print(f"{Fore.CYAN}Current connected SSID: None{Style.RESET_ALL}")
    print()
    print_table(results, known)
    if coordinator.last_skipped:
        print(f"{Fore.LIGHTBLACK_EX}Skipped {coordinator.last_skipped} unreadable scan line(s).{Style.RESET_ALL}")
    return 0


def cmd_watch(args):
    panel = NetworkPanel()
    panel.known_networks = _known_or_empty()
    watch(panel, interval=args.interval, count=args.count, tick=args.tick)
    return 0


def cmd_devices(args):
    try:
        devices = list_devices()
    except ScanError as e:
        print(f"{Fore.RED}Error listing devices: {e}{Style.RESET_ALL}")
        return 1
    print_devices(devices)
    return 0


def cmd_known(args):
    try:
        known = list_known_networks()
    except ScanError as e:
        print(f"{Fore.RED}Error listing known networks: {e}{Style.RESET_ALL}")
        return 1
    if not known:
        print(f"{Fore.RED}No saved networks.{Style.RESET_ALL}")
        return 0
    print(f"{Fore.CYAN}Saved networks:{Style.RESET_ALL}")
    for name in sorted(known):
        print(f"  - {name}")
    return 0


def cmd_connect(args):
    panel = NetworkPanel()
    panel.init()
    wait_for_scan(panel.coordinator, tick=args.tick)
    for name in args.disable:
        if not panel.set_device_enabled(name, False):
            print(f"{Fore.RED}Unknown device '{name}'{Style.RESET_ALL}")
    panel.select(args.id)
    if panel.coordinator.selected_network() is None:
        print(f"{Fore.RED}Network id {args.id} not found!{Style.RESET_ALL}")
    commands = panel.apply()
    for cmd in commands:
        print(f"{Fore.GREEN}{' '.join(cmd)}{Style.RESET_ALL}")
    if not commands:
        print(f"{Fore.YELLOW}Nothing to apply.{Style.RESET_ALL}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="wifipanel: network connectivity panel (nmcli)",
        usage="python -m wifipanel {scan,watch,devices,known,connect} [options]",
    )
    parser.add_argument(
        "--tick", type=float, default=0.1, help="Seconds between polls while scanning"
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("scan", help="Scan for WiFi networks")

    watch_parser = subparsers.add_parser("watch", help="Rescan WiFi networks periodically")
    watch_parser.add_argument(
        "--interval", type=float, default=10, help="Seconds between scans"
    )
    watch_parser.add_argument(
        "--count", type=int, default=5, help="Number of scans"
    )

    subparsers.add_parser("devices", help="List network devices")
    subparsers.add_parser("known", help="List saved networks")

    connect_parser = subparsers.add_parser("connect", help="Connect to a scanned network by id")
    connect_parser.add_argument("id", type=int, help="Network id from the scan table")
    connect_parser.add_argument(
        "--disable", action="append", default=[], metavar="DEVICE",
        help="Disconnect this device (repeatable)",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    handlers = {
        "scan": cmd_scan,
        "watch": cmd_watch,
        "devices": cmd_devices,
        "known": cmd_known,
        "connect": cmd_connect,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
