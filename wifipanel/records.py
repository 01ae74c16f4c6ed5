"""
records.py
----------
Decode nmcli terse (-t) WiFi list output into WirelessNetwork records.

Features:
- Escape-aware splitting of colon-delimited nmcli lines (\\: and \\\\).
- Sequential ids over emitted rows, starting at 0.
- Hidden networks (empty SSID) are dropped.
- The currently associated network is decorated with " (*)".

Author: Jason A. Cox
17 October 2026
"""
from dataclasses import dataclass

from .errors import ScanParseError

# Field order requested from nmcli with -f, see scan.SCAN_FIELDS
FIELDS = ("in_use", "bssid", "ssid", "mode", "channel", "rate", "signal", "bars", "security")

ASSOCIATED_MARKER = "*"
CURRENT_SUFFIX = " (*)"

# Stand-ins for escaped characters while splitting on ':'
_COLON = "\x00"
_BACKSLASH = "\x01"


@dataclass(frozen=True)
class WirelessNetwork:
    """One access point seen in a scan. Ids are only stable within one result set."""
    id: int
    bssid: str
    ssid: str
    mode: str = ""
    channel: int = 0
    rate: str = ""
    signal: int = 0
    bars: str = ""
    security: str = ""
    associated: bool = False

    @property
    def name(self):
        """SSID without the current-network decoration, as nmcli knows it."""
        if self.associated and self.ssid.endswith(CURRENT_SUFFIX):
            return self.ssid[: -len(CURRENT_SUFFIX)]
        return self.ssid

    @property
    def signal_category(self):
        if self.signal >= 80:
            return "excellent"
        elif self.signal >= 60:
            return "good"
        elif self.signal >= 40:
            return "fair"
        elif self.signal >= 20:
            return "weak"
        return "none"


def split_terse(line):
    """
    Split one line of nmcli terse output on unescaped colons.

    nmcli escapes ':' as '\\:' and '\\' as '\\\\' inside values. Escapes are
    swapped for placeholders before splitting and restored afterwards.

    Args:
        line (str): A single line of nmcli -t output.
    Returns:
        List[str]: Unescaped field values.
    """
    line = line.replace("\\\\", _BACKSLASH).replace("\\:", _COLON)
    return [f.replace(_COLON, ":").replace(_BACKSLASH, "\\") for f in line.split(":")]


def _unsigned(value, field, line):
    if not (value.isascii() and value.isdigit()):
        raise ScanParseError(line, f"{field} is not an unsigned integer")
    return int(value)


def parse_line(line, network_id=0):
    """
    Decode one nmcli WiFi list line.

    Args:
        line (str): Raw terse line in FIELDS order.
        network_id (int): Id to assign if the line yields a record.
    Returns:
        WirelessNetwork or None: None when the SSID is empty (hidden network).
    Raises:
        ScanParseError: Missing fields or malformed channel/signal.
    """
    fields = split_terse(line)
    if len(fields) < len(FIELDS):
        raise ScanParseError(line, f"expected {len(FIELDS)} fields, got {len(fields)}")
    marker, bssid, ssid, mode, channel, rate, signal, bars, security = fields[: len(FIELDS)]
    if not ssid:
        return None

    channel = _unsigned(channel.strip(), "channel", line)
    signal = _unsigned(signal.strip(), "signal", line)
    if signal > 100:
        raise ScanParseError(line, "signal out of range")

    associated = marker.strip() == ASSOCIATED_MARKER
    if associated:
        ssid += CURRENT_SUFFIX

    return WirelessNetwork(
        id=network_id,
        bssid=bssid,
        ssid=ssid,
        mode=mode,
        channel=channel,
        rate=rate,
        signal=signal,
        bars=bars,
        security=security,
        associated=associated,
    )


def parse_output(output):
    """
    Decode a full nmcli WiFi list. Malformed lines are skipped and counted;
    they do not consume an id.

    Args:
        output (str): Captured stdout of the scan command.
    Returns:
        Tuple[List[WirelessNetwork], int]: Records in scan order, and the number of skipped lines.
    """
    networks = []
    skipped = 0
    for line in output.splitlines():
        if not line.strip():
            continue
        try:
            net = parse_line(line, network_id=len(networks))
        except ScanParseError:
            skipped += 1
            continue
        if net is not None:
            networks.append(net)
    return networks, skipped
