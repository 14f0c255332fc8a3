"""Field-level cleaning and quantity helpers used by the template and parser."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

FIELD_SEPARATOR_REPLACEMENT = ";"


def clean_field(value: str | None) -> str:
    """Drop double quotes and outer whitespace from one delimited field."""

    if value is None:
        return ""
    return value.replace('"', "").strip()


def field_text(value: str | None) -> str:
    """Make free text safe to write as one comma-delimited field.

    The parser has no quoting support, so commas become `;` and double quotes
    are dropped. Otherwise a name like `Bolt, M8` would shift every column after it.
    """

    return clean_field(value).replace(",", FIELD_SEPARATOR_REPLACEMENT)


def split_line(line: str) -> list[str]:
    """Split one line on commas and clean every field.

    There is no quoting support: a comma inside a quoted value still splits the
    field. Generated templates pass free text through `field_text`, so they
    never contain such commas.
    """

    return [clean_field(value) for value in line.split(",")]


def parse_quantity(value: str) -> Decimal | None:
    """Parse an uploaded quantity; return None unless it is finite and non-negative."""

    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return None

    if not parsed.is_finite() or parsed < 0:
        return None
    return parsed


def coerce_quantity(value: object) -> Decimal:
    """Convert a quantity coming from the inventory store into a Decimal.

    Floats go through `str` so `12.5` stays `12.5` instead of its binary expansion.
    """

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Quantity is not numeric: {value!r}")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Quantity is not numeric: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Quantity is not finite: {value!r}")
    return parsed


def format_quantity(value: Decimal | int | None) -> str:
    """Render a quantity without exponent notation or redundant trailing zeros.

    Works for any finite value regardless of digit count, so no context
    precision limit applies.
    """

    if value is None:
        return "0"
    quantity = Decimal(value)
    if quantity == quantity.to_integral_value():
        return format(quantity.to_integral_value(), "f")
    return format(quantity, "f").rstrip("0")


def round_to_places(value: Decimal, places: int) -> Decimal:
    """Round half-up to `places` decimals without overflowing the default precision."""

    exponent = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)
