# =========================================================
# TOLERANT NUMERIC COERCION
#
# Manual data entry leaves numeric fields blank or
# half-typed. These helpers turn such values into a safe
# default instead of rejecting the whole request.
# =========================================================

from decimal import Decimal, InvalidOperation


# Largest value an INTEGER column holds on every supported backend
MAX_DB_INT = 2**31 - 1


def _parse_int(value):
    if isinstance(value, int):
        return value

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        return int(value)
    except (TypeError, ValueError):
        pass

    # "3.9" -> 3, same as truncating a float
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def coerce_int(value, default: int | None = 0, limit: int | None = MAX_DB_INT) -> int | None:
    """Integer from loose input; blank, malformed or out-of-range values give ``default``."""
    if value is None or isinstance(value, bool):
        return default

    number = _parse_int(value)

    if number is None:
        return default
    if limit is not None and abs(number) > limit:
        return default

    return number


def coerce_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str) and not value.strip():
        return None

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None

    if number != number:  # NaN
        return None

    return number


def coerce_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, float):
        value = str(value)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None

    if not amount.is_finite():
        return None

    return amount
