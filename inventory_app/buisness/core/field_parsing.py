"""
Request field coercion shared by the catalog and posting code.

Every helper raises ValidationError with a message naming the field, so a bad
body turns into a 400 instead of a database error.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from inventory_app.buisness.core.errors import ValidationError

# Largest value an INTEGER column holds on every supported database
MAX_INTEGER = 2 ** 31 - 1
# Largest value a Numeric(10, 2) column holds
MAX_MONEY = Decimal('99999999.99')
CENTS = Decimal('0.01')


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def require_text(data, field, label=None):
    value = data.get(field)
    if is_blank(value):
        raise ValidationError(f"{label or field.capitalize()} is required")
    return str(value).strip()


def optional_text(data, field):
    value = data.get(field)
    if is_blank(value):
        return None
    return str(value).strip()


def parse_int(value, field, minimum=None, maximum=MAX_INTEGER):
    if isinstance(value, bool) or is_blank(value):
        raise ValidationError(f"{field} must be an integer")
    try:
        # Accept "5" and 5 but not 5.5
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be an integer")
    if not number.is_finite() or number != number.to_integral_value():
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be at most {maximum}")
    return int(number)


def parse_optional_id(value, field):
    if is_blank(value):
        return None
    return parse_int(value, field, minimum=1)


def parse_money(value, field):
    if isinstance(value, bool) or is_blank(value):
        raise ValidationError(f"{field} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    if amount > MAX_MONEY:
        raise ValidationError(f"{field} must be at most {MAX_MONEY}")
    try:
        return amount.quantize(CENTS)
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")


def parse_date(value, field):
    """Parse an ISO date or ISO timestamp; a timestamp keeps only its date part"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_blank(value):
        raise ValidationError(f"{field} is required")
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format")
