"""
Cycle configuration: defaults, YAML loading and validation.
"""
from .defaults import CycleConfig, get_default_config
from .loader import ConfigLoader

__all__ = ["CycleConfig", "ConfigLoader", "get_default_config"]
