"""
wifipanel
---------
Network connectivity panel: interface enumeration, asynchronous WiFi scanning
via nmcli, known-network tracking, and applying connection changes.

Author: Jason A. Cox
17 October 2026
"""
__version__ = "0.1.0"
__author__ = "Jason A. Cox"

from .errors import WifiPanelError, ScanError, ScanParseError
from .records import WirelessNetwork, parse_line, parse_output
from .coordinator import ScanCoordinator
from .panel import NetworkPanel
from .scan import Device

__all__ = [
    "__version__",
    "__author__",
    "WifiPanelError",
    "ScanError",
    "ScanParseError",
    "WirelessNetwork",
    "parse_line",
    "parse_output",
    "ScanCoordinator",
    "NetworkPanel",
    "Device",
]
