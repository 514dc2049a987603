"""Configuration loader with 4-tier parameter precedence."""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from ..errors import ConfigurationError
from .defaults import CycleConfig, get_default_config
from .validation import ConfigValidator

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = "third_time.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 4-tier precedence."""

    config_dir: Path
    defaults: CycleConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load_file(self) -> dict[str, Any]:
        """Load the YAML document, or an empty one when the file is absent."""
        if not self.config_file.exists():
            return {}

        with open(self.config_file) as f:
            try:
                document = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Cannot parse {self.config_file}: {e}",
                    context={"path": str(self.config_file)}
                ) from e

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ConfigurationError(
                f"{self.config_file} must contain a mapping at top level",
                value=document
            )
        return document  # type: ignore[no-any-return]

    def merge_config(
        self,
        profile: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge cycle parameters with 4-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Named profile from the config file
        3. `cycle` section of the config file
        4. Built-in defaults (lowest priority)
        """
        config = asdict(self.defaults)
        document = self.load_file()

        config.update(document.get("cycle") or {})

        if profile is not None:
            profiles = document.get("profiles") or {}
            if profile not in profiles:
                raise ConfigurationError(
                    f"Unknown profile '{profile}'",
                    field="profile",
                    value=profile,
                    context={"available": sorted(profiles)}
                )
            config.update(profiles[profile] or {})

        if overrides:
            config.update(overrides)

        return config

    def load_cycle_config(
        self,
        profile: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> CycleConfig:
        """Build a validated CycleConfig from the merged parameters."""
        merged = self.merge_config(profile, overrides)

        known = {f.name for f in fields(CycleConfig)}
        unknown = sorted(set(merged) - known)
        if unknown:
            logger.warning("Ignoring unknown cycle parameters", parameters=unknown)

        params = {key: value for key, value in merged.items() if key in known}
        ConfigValidator.raise_for_errors(ConfigValidator.validate_cycle_params(params))

        config = CycleConfig(**params)
        logger.debug("Cycle configuration loaded", profile=profile, **params)
        return config
