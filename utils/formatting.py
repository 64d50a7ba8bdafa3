# cashwrap/utils/formatting.py

from datetime import date
from typing import Optional


def format_peso(n: Optional[float]) -> str:
    """
    Format an amount Philippine-style with ',' as thousands separator.
    Example: 1234567.5 -> "₱1,234,567.50"
    """
    return f"₱{(n or 0):,.2f}"


def format_units(units: float, label: str) -> str:
    """
    Example: (2.5, "Box") -> "2.5 Boxes", (1, "Booklet") -> "1 Booklet"
    """
    shown = f"{units:,.1f}".rstrip("0").rstrip(".") if units != int(units) else f"{int(units):,}"
    if units == 1:
        return f"{shown} {label}"
    plural = f"{label}es" if label.endswith("x") else f"{label}s"
    return f"{shown} {plural}"


def today_iso() -> str:
    return date.today().isoformat()
