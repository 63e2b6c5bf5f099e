"""
Persistence records exchanged with the blueprint store.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Any


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 string or epoch milliseconds into an aware datetime.

    Missing or unparseable values map to the epoch so sorting stays total.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return datetime.fromtimestamp(0, tz=timezone.utc)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(0, tz=timezone.utc)


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with a trailing Z, as the web application writes it."""
    return value.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class NamedMarkupSave:
    """A user-named copy of a snapshot. Many per blueprint, never implicitly deleted."""
    id: str
    blueprint_id: str
    name: str
    serialized_snapshot: str
    is_shared: bool = False
    description: Optional[str] = None
    owner_id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class Blueprint:
    """A reference image plus its single mutable live markup."""
    id: str
    job_id: Optional[str]
    source_image_url: str
    live_markup: str = '[]'
    version: int = 0
    name: str = ''
    named_saves: List[NamedMarkupSave] = field(default_factory=list)


@dataclass(frozen=True)
class LiveSaveResult:
    """Outcome of overwriting the live markup; version/updated_at act as the version marker."""
    blueprint_id: str
    live_markup: str
    updated_at: datetime
    version: Optional[int] = None


__all__ = [
    'parse_timestamp',
    'format_timestamp',
    'utc_now',
    'NamedMarkupSave',
    'Blueprint',
    'LiveSaveResult',
]
