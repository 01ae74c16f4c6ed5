"""
panel.py
--------
The Network page of the control panel.

Features:
- init(): enumerate devices, start the first WiFi scan, load known networks.
- show(): one UI tick; polls the scan and renders devices plus either a
  progress line or the result table.
- apply(): connect/disconnect devices whose desired state changed and join
  the selected WiFi network.

Author: Jason A. Cox
17 October 2026
"""
import subprocess

from colorama import Fore, Style

from .coordinator import ScanCoordinator
from .errors import ScanError
from .scan import list_devices, list_known_networks, print_devices, print_table

SPINNER = "|/-\\"


class NetworkPanel:
    """
    Network settings page.

    Args:
        coordinator (ScanCoordinator): Scan state; a default one is created if omitted.
        runner (Callable): Issues nmcli commands in apply(); defaults to subprocess.run.
    """

    def __init__(self, coordinator=None, runner=None):
        self.coordinator = coordinator or ScanCoordinator()
        self.devices = []
        self.known_networks = frozenset()
        self._runner = runner
        self._init = False
        self._ticks = 0

    def name(self):
        return "Network"

    def is_init(self):
        return self._init

    def init(self):
        """Enumerate devices, trigger the initial scan and load saved networks."""
        try:
            self.devices = list_devices()
        except ScanError as e:
            print(f"{Fore.RED}Error listing devices: {e}{Style.RESET_ALL}")
            self.devices = []

        self.coordinator.trigger_scan()

        try:
            self.known_networks = list_known_networks()
        except ScanError as e:
            print(f"{Fore.RED}Error listing known networks: {e}{Style.RESET_ALL}")
            self.known_networks = frozenset()

        self._init = True

    def rescan(self):
        """User pressed "Scan WiFi". Ignored while a scan is running."""
        return self.coordinator.trigger_scan()

    def select(self, network_id):
        self.coordinator.set_selection(network_id)

    def set_device_enabled(self, name, enabled):
        for dev in self.devices:
            if dev.name == name:
                dev.enabled = enabled
                return True
        return False

    def show(self):
        """Render one frame. Safe to call on every tick; never waits on the scan."""
        self.coordinator.poll()
        print_devices(self.devices)
        print()
        if self.coordinator.is_scanning():
            frame = SPINNER[self._ticks % len(SPINNER)]
            self._ticks += 1
            print(f"{Fore.YELLOW}{frame} Scanning for WiFi networks...{Style.RESET_ALL}")
            return
        print_table(self.coordinator.current_results(), self.known_networks,
                    self.coordinator.selection())
        if self.coordinator.last_error:
            print(f"{Fore.RED}Error scanning WiFi: {self.coordinator.last_error}{Style.RESET_ALL}")
        if self.coordinator.last_skipped:
            print(f"{Fore.LIGHTBLACK_EX}Skipped {self.coordinator.last_skipped} unreadable scan line(s).{Style.RESET_ALL}")

    def apply(self):
        """
        Issue the nmcli commands for pending changes.

        A selection that no longer matches a current result (a newer scan
        replaced the list) is ignored.

        Returns:
            List[List[str]]: Commands issued, in order.
        """
        runner = self._runner or subprocess.run
        commands = []
        for dev in self.devices:
            if dev.enabled == dev.connected:
                continue
            action = "connect" if dev.enabled else "disconnect"
            commands.append(["nmcli", "device", action, dev.name])

        net = self.coordinator.selected_network()
        if net is not None and not net.associated:
            commands.append(["nmcli", "device", "wifi", "connect", net.name])

        for cmd in commands:
            try:
                result = runner(cmd, capture_output=True, text=True)
            except (FileNotFoundError, OSError) as e:
                print(f"{Fore.RED}Error running {' '.join(cmd)}: {e}{Style.RESET_ALL}")
                continue
            if result.returncode != 0:
                print(f"{Fore.RED}{' '.join(cmd)} failed: {(result.stderr or '').strip()}{Style.RESET_ALL}")
        return commands

