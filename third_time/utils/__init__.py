"""
Utility functions module.

Time Semantics:
- All timestamps handled by the scheduler are timezone-aware datetimes
- Durations are float seconds; configuration speaks in minutes
- The injected clock is authoritative, wall-clock time is only a fallback
"""
