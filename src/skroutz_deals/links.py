from __future__ import annotations


_OSC = "\x1b]"
_ST = "\x1b\\"


def osc8_link(url: str, text: str) -> str:
    """Clickable hyperlink for terminals that understand OSC 8."""
    return f"{_OSC}8;;{url}{_ST}{text}{_OSC}8;;{_ST}"


def plain_link(url: str, text: str) -> str:
    return url
