"""Walk log entry and its categorical ratings.

The same dictionary shape is used on the wire (remote `walk_logs` rows)
and in the local cache blob.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

DEFAULT_USER_NAME = "User"


class WalkQuality(Enum):
    """How the walk went."""

    GOOD = "good"
    OKAY = "okay"
    BAD = "bad"

    @property
    def label(self) -> str:
        return _QUALITY_LABELS[self]

    @property
    def short_label(self) -> str:
        """Word used in the stats line ("great", "okay", "poor")."""
        return _QUALITY_SHORT_LABELS[self]

    @property
    def color(self) -> str:
        return _QUALITY_COLORS[self]

    @property
    def emoji(self) -> str:
        return _QUALITY_EMOJI[self]


class BathroomActivity(Enum):
    """What the dog got done outside."""

    NONE = "none"
    PEE = "pee"
    POOP = "poop"
    BOTH = "both"

    @property
    def label(self) -> str:
        return _BATHROOM_LABELS[self]

    @property
    def emoji(self) -> str:
        return _BATHROOM_EMOJI[self]


_QUALITY_LABELS = {
    WalkQuality.GOOD: "Great Walk",
    WalkQuality.OKAY: "Okay Walk",
    WalkQuality.BAD: "Poor Walk",
}
_QUALITY_SHORT_LABELS = {
    WalkQuality.GOOD: "great",
    WalkQuality.OKAY: "okay",
    WalkQuality.BAD: "poor",
}
_QUALITY_COLORS = {
    WalkQuality.GOOD: "green",
    WalkQuality.OKAY: "orange",
    WalkQuality.BAD: "red",
}
_QUALITY_EMOJI = {
    WalkQuality.GOOD: "🐕🥇",
    WalkQuality.OKAY: "🐕",
    WalkQuality.BAD: "🐕🫣",
}
_BATHROOM_LABELS = {
    BathroomActivity.NONE: "Nothing",
    BathroomActivity.PEE: "Pee",
    BathroomActivity.POOP: "Poop",
    BathroomActivity.BOTH: "Both",
}
_BATHROOM_EMOJI = {
    BathroomActivity.NONE: "🚫",
    BathroomActivity.PEE: "💧",
    BathroomActivity.POOP: "💩",
    BathroomActivity.BOTH: "💩💧",
}


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing "Z".

    Naive timestamps are taken to be UTC.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO-8601 string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class WalkLog:
    """A single logged walk.

    Use `WalkLog.create()` for new entries so `id` and `date` are assigned.
    """

    id: str | None
    date: datetime
    quality: WalkQuality
    bathroom: BathroomActivity
    user_name: str = DEFAULT_USER_NAME
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.notes == "":
            object.__setattr__(self, "notes", None)

    @classmethod
    def create(
        cls,
        quality: WalkQuality,
        bathroom: BathroomActivity,
        notes: str | None = None,
        user_name: str = DEFAULT_USER_NAME,
    ) -> "WalkLog":
        """Create a new entry with a fresh id and the current time."""
        return cls(
            id=str(uuid.uuid4()),
            date=datetime.now(timezone.utc),
            quality=quality,
            bathroom=bathroom,
            user_name=user_name,
            notes=notes,
        )

    def with_changes(self, **changes: Any) -> "WalkLog":
        """Return an edited copy. `id` and `date` cannot change."""
        if "id" in changes or "date" in changes:
            raise ValueError("id and date of a walk log are immutable")
        return replace(self, **changes)

    def require_id(self) -> str:
        """Return the id, or raise if the entry was never assigned one."""
        if self.id is None:
            raise ValueError("Walk log has no id and cannot be synced")
        return self.id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "walkQuality": self.quality.value,
            "bathroom": self.bathroom.value,
            "userName": self.user_name,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WalkLog":
        """Create from dictionary.

        Raises:
            KeyError: A required field is missing.
            ValueError: A field has an unknown value or bad format.
        """
        return cls(
            id=data.get("id"),
            date=parse_timestamp(data["date"]),
            quality=WalkQuality(data["walkQuality"]),
            bathroom=BathroomActivity(data["bathroom"]),
            user_name=data.get("userName") or DEFAULT_USER_NAME,
            notes=data.get("notes"),
        )

    def summary(self) -> str:
        """Render the entry the way the history list shows it."""
        lines = [
            f"{self.quality.emoji} {self.bathroom.emoji}",
            f"{self.user_name} - {self.quality.label}",
            self.date.astimezone().strftime("%b %d, %Y at %I:%M %p"),
        ]
        if self.notes:
            lines.append(self.notes)
        return "\n".join(lines)
