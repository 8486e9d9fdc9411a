from __future__ import annotations

from datetime import date


def calculate_age(dob: date | str | None, today: date | None = None) -> int:
    """Whole years since `dob`; 0 when the date is missing, unparseable or in the future."""
    if not dob:
        return 0
    if isinstance(dob, str):
        try:
            dob = date.fromisoformat(dob.strip())
        except ValueError:
            return 0
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age if age > 0 else 0
