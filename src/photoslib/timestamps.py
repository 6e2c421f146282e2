from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import ROUND_DOWN, Decimal, DecimalException, InvalidOperation

from photoslib.errors import TimestampDecodeError

# Seconds between 1970-01-01 and 2001-01-01, the reference date of the store.
APPLE_EPOCH = 978307200

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NANOS = Decimal(1_000_000_000)
# Far beyond the datetime range; larger values never reach the arithmetic.
_MAX_SECONDS = Decimal(10**12)


def _parse(raw: object) -> Decimal:
    if isinstance(raw, bool) or raw is None:
        raise TimestampDecodeError(f"not a timestamp: {raw!r}")
    text = repr(raw) if isinstance(raw, float) else str(raw).strip()
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise TimestampDecodeError(f"not a decimal timestamp: {raw!r}") from exc
    if not value.is_finite():
        raise TimestampDecodeError(f"not a finite timestamp: {raw!r}")
    if abs(value) > _MAX_SECONDS:
        raise TimestampDecodeError(f"timestamp out of range: {raw!r}")
    return value


def decode_timestamp(raw: object) -> datetime:
    """Convert seconds since 2001-01-01 UTC into an aware UTC datetime.

    ``raw`` may be the decimal text stored by the library or a plain number.
    The sub-second part is truncated, first to nanoseconds and then to the
    microsecond resolution of ``datetime``.
    """
    value = _parse(raw)
    try:
        ts = value + APPLE_EPOCH
        secs = int(ts.to_integral_value(rounding=ROUND_DOWN))
        if ts < 0 and ts != secs:
            secs -= 1
        nanos = int(((ts - secs) * _NANOS).to_integral_value(rounding=ROUND_DOWN))
        return _UNIX_EPOCH + timedelta(seconds=secs, microseconds=nanos // 1000)
    except (OverflowError, DecimalException) as exc:
        raise TimestampDecodeError(f"timestamp out of range: {raw!r}") from exc


def encode_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        raise ValueError("naive datetime; expected an aware UTC value")
    delta = value.astimezone(timezone.utc) - _UNIX_EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    seconds = Decimal(micros).scaleb(-6) - APPLE_EPOCH
    return format(seconds.normalize(), "f")
