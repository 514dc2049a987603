"""Default configuration parameters for Third Time scheduling."""

from dataclasses import dataclass
from typing import Optional

from ..utils.time import minutes_to_seconds


@dataclass(frozen=True)
class CycleConfig:
    """Parameters for one scheduling session. Lengths are in minutes."""
    # Work intervals
    work_length_minutes: float = 25.0                # Nominal work interval

    # Break computation
    break_to_work_ratio: float = 1 / 3               # Break seconds per work second
    minimum_break_minutes: float = 1.0               # Floor for computed breaks

    # Long breaks (manual only)
    long_break_minutes: float = 20.0
    long_break_frequency: Optional[int] = None       # None disables the automatic trigger

    # Manual commands
    default_end_in_minutes: float = 5.0              # end_in() with no argument

    # Deadline handling
    work_overtime: bool = False                      # Keep working past the deadline until ended
    break_overtime: bool = True                      # Wait for the user to return from a break

    @property
    def work_length(self) -> float:
        return minutes_to_seconds(self.work_length_minutes)

    @property
    def minimum_break_length(self) -> float:
        return minutes_to_seconds(self.minimum_break_minutes)

    @property
    def long_break_length(self) -> float:
        return minutes_to_seconds(self.long_break_minutes)


def get_default_config() -> CycleConfig:
    """Get the default configuration instance."""
    return CycleConfig()
