from datetime import datetime, timezone


def local_now(tz=None) -> datetime:
    """Current time as an aware datetime in ``tz`` (host zone when None)."""
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def date_str(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def hhmm(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def utc_iso(moment: datetime) -> str:
    # 2024-01-01T09:30:00.000Z
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
