"""
Centralized logging configuration for the Third Time scheduler.

All components log through structlog on top of the standard library
logging module, so a host application can route scheduler records with its
own handlers or render them as JSON.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the scheduler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for cycle state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the state machine subsystem
    """
    return structlog.get_logger(
        name,
        subsystem="state_machine",
        audit_trail=True
    )


def get_bank_logger(name: str) -> FilteringBoundLogger:
    """Get a logger for bank mutations."""
    return structlog.get_logger(
        name,
        subsystem="bank",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a cycle state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: State being left
        to_state: State being entered
        trigger: Deadline, command or kill that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_bank_update(
    logger: FilteringBoundLogger,
    reason: str,
    previous: float,
    balance: float,
    delta: Optional[float] = None
) -> None:
    """
    Log a change of the break bank.

    Args:
        logger: Structlog logger instance
        reason: Why the bank changed (break_outcome, consumed, reset, ...)
        previous: Balance in seconds before the change
        balance: Balance in seconds after the change
        delta: Seconds applied, when the change was a delta
    """
    bound_logger = logger.bind(
        reason=reason,
        previous_seconds=round(previous, 3),
        balance_seconds=round(balance, 3),
    )

    if delta is not None:
        bound_logger = bound_logger.bind(delta_seconds=round(delta, 3))

    bound_logger.info("Bank updated")
