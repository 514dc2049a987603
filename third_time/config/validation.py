"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..errors import ConfigurationError
from ..utils.time import is_real_number

_NON_NEGATIVE_FIELDS = (
    "break_to_work_ratio",
    "minimum_break_minutes",
    "long_break_minutes",
    "default_end_in_minutes",
)

_BOOLEAN_FIELDS = ("work_overtime", "break_overtime")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates cycle configuration parameters."""

    @staticmethod
    def validate_cycle_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate cycle parameters."""
        errors = []

        # Work length must leave room to work
        if "work_length_minutes" in params:
            value = params["work_length_minutes"]
            if not is_real_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="work_length_minutes",
                    message="Must be a positive number",
                    value=value
                ))

        for field in _NON_NEGATIVE_FIELDS:
            if field in params:
                value = params[field]
                if not is_real_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a non-negative number",
                        value=value
                    ))

        if "long_break_frequency" in params:
            value = params["long_break_frequency"]
            if value is not None:
                errors.append(ValidationError(
                    field="long_break_frequency",
                    message="Must be null, long breaks are started manually",
                    value=value
                ))

        for field in _BOOLEAN_FIELDS:
            if field in params and not isinstance(params[field], bool):
                errors.append(ValidationError(
                    field=field,
                    message="Must be a boolean",
                    value=params[field]
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete configuration document."""
        errors = []

        if "cycle" in config:
            errors.extend(ConfigValidator.validate_cycle_params(config["cycle"]))

        for name, profile in (config.get("profiles") or {}).items():
            for error in ConfigValidator.validate_cycle_params(profile or {}):
                errors.append(ValidationError(
                    field=f"profiles.{name}.{error.field}",
                    message=error.message,
                    value=error.value
                ))

        return errors

    @staticmethod
    def raise_for_errors(errors: list[ValidationError]) -> None:
        """Raise ConfigurationError describing the first of `errors`, if any."""
        if not errors:
            return

        first = errors[0]
        raise ConfigurationError(
            f"{first.field}: {first.message} (got: {first.value!r})",
            field=first.field,
            value=first.value,
            context={"errors": [f"{err.field}: {err.message}" for err in errors]}
        )
