#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
nmcli invocation and table output for wifipanel.

Features:
- Runs the nmcli WiFi scan and returns its raw terse output.
- One-shot device and known-connection enumeration.
- Colorized table output using colorama.

All functions here block until nmcli exits. run_scan() in particular may take
seconds and is only called from the scan worker thread.

Author: Jason A. Cox
17 October 2026
"""

import subprocess
from dataclasses import dataclass

from colorama import Fore, Style, init

from .errors import ScanError
from .records import split_terse

init(autoreset=True)

SCAN_FIELDS = "IN-USE,BSSID,SSID,MODE,CHAN,RATE,SIGNAL,BARS,SECURITY"
SCAN_COMMAND = ["nmcli", "-t", "-f", SCAN_FIELDS, "device", "wifi", "list"]
DEVICE_COMMAND = ["nmcli", "-t", "-f", "DEVICE,TYPE,STATE", "device"]
KNOWN_COMMAND = ["nmcli", "-t", "-f", "NAME", "connection", "show"]


@dataclass
class Device:
    """A network interface as reported by nmcli. `enabled` is the state the user wants."""
    name: str
    type: str = ""
    state: str = ""
    enabled: bool = True

    @property
    def connected(self):
        return self.state.startswith("connected")


def _run(cmd):
    """
    Run an nmcli command once and return its decoded stdout.
    Args:
        cmd (List[str]): Command and arguments.
    Returns:
        str: Captured stdout.
    Raises:
        ScanError: Command missing, failed, or produced non-UTF-8 output.
    """
    try:
        result = subprocess.run(cmd, capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError, OSError) as e:
        raise ScanError(f"{cmd[0]} failed: {e}") from e
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ScanError(f"{cmd[0]} output is not valid text: {e}") from e


def run_scan(cmd=None):
    """
    Run the WiFi scan command and return its raw output. No retries.
    Args:
        cmd (List[str]): Override for SCAN_COMMAND.
    Returns:
        str: nmcli terse output, one access point per line.
    """
    return _run(cmd or SCAN_COMMAND)


def list_devices(cmd=None):
    """
    Enumerate network interfaces.
    Returns:
        List[Device]: One entry per interface, enabled if nmcli reports it connected.
    """
    devices = []
    for line in _run(cmd or DEVICE_COMMAND).splitlines():
        if not line.strip():
            continue
        fields = split_terse(line) + ["", ""]
        name, dev_type, state = fields[:3]
        if not name:
            continue
        devices.append(Device(name=name, type=dev_type, state=state, enabled=state.startswith("connected")))
    return devices


def list_known_networks(cmd=None):
    """
    Enumerate saved connection names (networks previously authorized).
    Returns:
        frozenset: Connection names.
    """
    names = set()
    for line in _run(cmd or KNOWN_COMMAND).splitlines():
        name = split_terse(line)[0]
        if name:
            names.add(name)
    return frozenset(names)


def print_devices(devices):
    """
    Print the interface list with the desired enable state.
    """
    if not devices:
        print(f"{Fore.RED}No network devices found.{Style.RESET_ALL}")
        return
    print(f"{Fore.CYAN}{'Device':<16} {'Type':<10} {'State':<14} {'Enable':<6}{Style.RESET_ALL}")
    for dev in devices:
        state_color = Fore.GREEN if dev.connected else Fore.LIGHTBLACK_EX
        enable = "[x]" if dev.enabled else "[ ]"
        print(f"{Fore.WHITE}{dev.name:<16} {Fore.BLUE}{dev.type:<10} {state_color}{dev.state:<14} {Fore.YELLOW}{enable:<6}{Style.RESET_ALL}")


def print_table(networks, known=(), selected=None):
    """
    Print a colorized table of WiFi networks in scan order.
    Args:
        networks (Sequence[WirelessNetwork]): Current results.
        known (Collection[str]): Saved connection names, marked in the Known column.
        selected (int): Id of the network chosen for connection.
    """
    if not networks:
        print(f"{Fore.RED}No WiFi networks found.{Style.RESET_ALL}")
        return

    header_parts = [
        ("Sel", 4),
        ("ID", 4),
        ("SSID", 28),
        ("BSSID", 18),
        ("Mode", 7),
        ("Chan", 5),
        ("Rate", 11),
        ("Signal", 7),
        ("Bars", 5),
        ("Security", 12),
        ("Known", 5),
    ]
    header_str = "".join(f"{name:<{width}} " for name, width in header_parts)
    print(f"{Fore.CYAN}{header_str.rstrip()}{Style.RESET_ALL}")

    for net in networks:
        # Signal strength: >= 60% good, 40-59% fair, below is weak
        if net.signal >= 60:
            color = Fore.GREEN
        elif net.signal >= 40:
            color = Fore.YELLOW
        else:
            color = Fore.RED

        ssid_display = net.ssid[:25] + '...' if len(net.ssid) > 28 else net.ssid
        ssid_color = Fore.GREEN if net.associated else Fore.WHITE
        mark = "(o)" if net.id == selected else "( )"

        row_parts = [
            (Fore.YELLOW, mark, 4),
            (Fore.LIGHTBLACK_EX, str(net.id), 4),
            (ssid_color, ssid_display, 28),
            (Fore.LIGHTBLACK_EX, net.bssid, 18),
            (Fore.CYAN, net.mode, 7),
            (Fore.MAGENTA, str(net.channel), 5),
            (Fore.YELLOW, net.rate, 11),
            (color, f"{net.signal}%", 7),
            (color, net.bars, 5),
            (Fore.LIGHTWHITE_EX, net.security[:12], 12),
            (Fore.GREEN, "yes" if net.name in known else "", 5),
        ]
        row_str = "".join(f"{color}{value:<{width}} " for color, value, width in row_parts)
        print(f"{row_str.rstrip()}{Style.RESET_ALL}")
