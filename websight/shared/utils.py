from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(value: float | None) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_scroll_percentage(scroll_y: float, total_height: float, viewport_height: float) -> str:
    scrollable = total_height - viewport_height
    if scrollable <= 0:
        return "Y=0 (0% of page)"
    percentage = round_half_up(scroll_y / scrollable * 100)
    return f"Y={format_number(scroll_y)} ({percentage}% of page)"
