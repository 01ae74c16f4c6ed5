"""
errors.py
---------
Exceptions raised by wifipanel.
"""


class WifiPanelError(Exception):
    """Base class for wifipanel errors."""


class ScanError(WifiPanelError):
    """An nmcli invocation could not run or returned unusable output."""


class ScanParseError(WifiPanelError):
    """One line of nmcli terse output could not be decoded."""

    def __init__(self, line, reason):
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason
