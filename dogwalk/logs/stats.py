"""Read-only queries over a collection of walk logs."""

from collections.abc import Iterable
from dataclasses import dataclass

from .models import WalkLog, WalkQuality


@dataclass(frozen=True)
class WalkStats:
    """Counts of walks by quality."""

    total: int = 0
    good: int = 0
    okay: int = 0
    bad: int = 0

    def by_quality(self) -> dict[WalkQuality, int]:
        return {
            WalkQuality.GOOD: self.good,
            WalkQuality.OKAY: self.okay,
            WalkQuality.BAD: self.bad,
        }

    def summary(self) -> str:
        """One-line header, e.g. "4 walks • 2 great • 1 okay • 1 poor"."""
        parts = [f"{self.total} walks"]
        for quality, count in self.by_quality().items():
            parts.append(f"{count} {quality.short_label}")
        return " • ".join(parts)

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "good": self.good,
            "okay": self.okay,
            "bad": self.bad,
        }


def compute_stats(logs: Iterable[WalkLog]) -> WalkStats:
    """Count walks in total and per quality."""
    counts = {quality: 0 for quality in WalkQuality}
    total = 0
    for log in logs:
        counts[log.quality] += 1
        total += 1

    return WalkStats(
        total=total,
        good=counts[WalkQuality.GOOD],
        okay=counts[WalkQuality.OKAY],
        bad=counts[WalkQuality.BAD],
    )


def filter_by_quality(
    logs: Iterable[WalkLog], quality: WalkQuality | None
) -> list[WalkLog]:
    """Keep logs of the given quality, preserving order. None keeps all."""
    if quality is None:
        return list(logs)
    return [log for log in logs if log.quality == quality]
