"""Parsers turning engine command output into records.

All functions here are pure. List parsers take the raw stdout of a
templated listing command and produce one record per non-empty line, in
order; fields are tab-separated.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Callable

from paulenv.engines.base import ContainerInfo, ImageInfo, NetworkInfo, VolumeInfo
from paulenv.engines.errors import UnknownVersionFormat
from paulenv.engines.naming import project_from_image, project_from_network

FIELD_SEPARATOR = "\t"

# "2023-10-05 14:32:10.123456789 +0200 CEST", fraction optional
_ENGINE_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))? ([+-])(\d{2})(\d{2}) \S+$"
)
# "2023-10-05T14:32:10.123456789+02:00", fraction optional
_RFC3339_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?(?:([Zz])|([+-])(\d{2}):(\d{2}))$"
)


def _lines(output: str) -> list[str]:
    """Non-empty lines of a command output, without trailing whitespace."""
    lines = []
    for line in output.splitlines():
        line = line.rstrip()
        if line.strip():
            lines.append(line)
    return lines


def _fields(line: str, count: int) -> list[str | None]:
    """Split a line into exactly `count` fields, missing or empty ones as None."""
    parts = line.split(FIELD_SEPARATOR, count - 1)
    fields: list[str | None] = [part if part else None for part in parts]
    fields.extend([None] * (count - len(fields)))
    return fields


def _build_datetime(
    date: str,
    hour: str,
    minute: str,
    second: str,
    fraction: str | None,
    offset: timedelta,
) -> datetime | None:
    try:
        day = datetime.strptime(date, "%Y-%m-%d")
        # Sub-microsecond precision is dropped
        microsecond = int((fraction or "0").ljust(6, "0")[:6])
        return day.replace(
            hour=int(hour),
            minute=int(minute),
            second=int(second),
            microsecond=microsecond,
            tzinfo=timezone(offset),
        )
    except ValueError:
        return None


def parse_engine_timestamp(text: str) -> datetime | None:
    """Parse the "CreatedAt" style used by engine listings."""
    match = _ENGINE_TIMESTAMP_RE.match(text.strip())
    if not match:
        return None
    date, hour, minute, second, fraction, sign, off_h, off_m = match.groups()
    offset = timedelta(hours=int(off_h), minutes=int(off_m))
    if sign == "-":
        offset = -offset
    return _build_datetime(date, hour, minute, second, fraction, offset)


def parse_rfc3339(text: str) -> datetime | None:
    """Parse an RFC 3339 timestamp, with up to nanosecond precision."""
    match = _RFC3339_RE.match(text.strip())
    if not match:
        return None
    date, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()
    offset = timedelta(0)
    if not zulu:
        offset = timedelta(hours=int(off_h), minutes=int(off_m))
        if sign == "-":
            offset = -offset
    return _build_datetime(date, hour, minute, second, fraction, offset)


# Tried in order; the first one that parses wins
TIMESTAMP_PARSERS: tuple[Callable[[str], datetime | None], ...] = (
    parse_engine_timestamp,
    parse_rfc3339,
)


def parse_timestamp(text: str | None) -> datetime | None:
    """Parse a timestamp in any accepted format, None if none matches."""
    if not text or not text.strip():
        return None
    for parser in TIMESTAMP_PARSERS:
        parsed = parser(text)
        if parsed is not None:
            return parsed
    return None


def parse_version(engine: str, output: str, pattern: re.Pattern[str]) -> str:
    """Extract a version number from a version banner.

    Raises:
        UnknownVersionFormat: If the pattern does not match
    """
    banner = output.strip()
    match = pattern.search(banner)
    if not match:
        raise UnknownVersionFormat(engine, banner)
    return match.group(1)


def parse_images(output: str) -> list[ImageInfo]:
    """Parse "{{.Repository}}:{{.Tag}}\\t{{.CreatedAt}}" lines."""
    result = []
    for line in _lines(output):
        image_name, created_at = _fields(line, 2)
        # Lines starting with a separator have no usable name
        if image_name is None:
            image_name = ""
        result.append(ImageInfo(
            image_name=image_name,
            project_name=project_from_image(image_name),
            built_at=parse_timestamp(created_at),
        ))
    return result


def parse_containers(output: str) -> list[ContainerInfo]:
    """Parse "{{.ID}}\\t{{.Image}}\\t{{.Names}}" lines."""
    result = []
    for line in _lines(output):
        container_id, image_name, container_name = _fields(line, 3)
        result.append(ContainerInfo(
            container_id=container_id or "",
            container_name=container_name,
            image_name=image_name,
            project_name=project_from_image(image_name),
        ))
    return result


def parse_volumes(output: str) -> list[VolumeInfo]:
    """Parse "{{.Name}}" lines; a volume's id is its name."""
    return [
        VolumeInfo(volume_id=line.strip(), volume_name=line.strip())
        for line in _lines(output)
    ]


def parse_networks(output: str) -> list[NetworkInfo]:
    """Parse "{{.ID}}\\t{{.Name}}" lines.

    Lines without both fields, or with either one empty, are dropped: a network cannot be removed
    or attributed to a project without them.
    """
    result = []
    for line in _lines(output):
        parts = line.split(FIELD_SEPARATOR, 1)
        if len(parts) < 2:
            continue
        network_id, network_name = parts
        if not network_id or not network_name:
            continue
        result.append(NetworkInfo(
            network_id=network_id,
            network_name=network_name,
            project_name=project_from_network(network_name),
        ))
    return result
