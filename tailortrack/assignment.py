from typing import Iterable, Optional, Tuple

from .errors import ValidationError
from .models import StaffBook


def parse_range(billbook_range: str) -> Tuple[int, int]:
    """"301-350" -> (301, 350)"""
    parts = billbook_range.strip().split("-")
    if len(parts) != 2 or not all(p.strip().isdecimal() for p in parts):
        raise ValidationError(f"Invalid billbook range: {billbook_range!r}")
    start, end = int(parts[0]), int(parts[1])
    if start > end:
        raise ValidationError(f"Invalid billbook range: {billbook_range!r}")
    return start, end


def _serial_value(serial_number: str) -> Optional[int]:
    s = serial_number.strip()
    return int(s) if s.isdecimal() else None


def resolve_staff(serial_number: str, assignments: Iterable[StaffBook]) -> str:
    """
    Name of the staff member whose billbook range contains the serial number.

    Ranges may overlap; the first one in iteration order wins. Returns "" when
    nothing matches or the serial is not a number.
    """
    value = _serial_value(serial_number)
    if value is None:
        return ""
    for sb in assignments:
        try:
            start, end = parse_range(sb.billbook_range)
        except ValidationError:
            continue
        if start <= value <= end:
            return sb.staff_name
    return ""
