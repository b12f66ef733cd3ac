# SPDX-License-Identifier: MIT

from typing import Optional, TypeAlias, cast

import pendulum

# (year, month, day) in the host's local time zone
DayKey: TypeAlias = tuple[int, int, int]

LOCAL_DATETIME_FORMAT = "ddd, MMM D, YYYY HH:mm"


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("UTC").isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    return None if datetime is None else datetime_to_iso_str(datetime)


def datetime_from_str(value: str) -> pendulum.DateTime:
    """Parse an ISO-8601 instant, as written by this app or the remote service."""
    return cast(pendulum.DateTime, pendulum.parse(value)).in_tz("UTC")


def datetime_from_str_optional(value: Optional[str]) -> Optional[pendulum.DateTime]:
    return None if value is None else datetime_from_str(value)


def datetime_to_epoch_ms(datetime: pendulum.DateTime) -> int:
    return int(datetime.timestamp() * 1000)


def datetime_from_epoch_ms(epoch_ms: int) -> pendulum.DateTime:
    return pendulum.from_timestamp(epoch_ms / 1000, tz="UTC")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format(LOCAL_DATETIME_FORMAT)


def local_day_key(datetime: pendulum.DateTime) -> DayKey:
    local = datetime.in_tz("local")
    return (local.year, local.month, local.day)
