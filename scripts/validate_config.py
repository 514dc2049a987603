#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path

from third_time.config.loader import ConfigLoader
from third_time.config.validation import ConfigValidator
from third_time.errors import ConfigurationError


def main() -> None:
    """Validate the cycle section and every profile of the config file."""
    parser = argparse.ArgumentParser(description="Validate Third Time configuration")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding third_time.yaml")
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating {loader.config_file}...")

    try:
        document = loader.load_file()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(document)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value!r})")
        sys.exit(1)

    profiles = [None, *sorted(document.get("profiles") or {})]
    all_valid = True
    for profile in profiles:
        label = profile or "default"
        try:
            config = loader.load_cycle_config(profile)
        except ConfigurationError as e:
            print(f"❌ {label}: {e}")
            all_valid = False
            continue
        print(f"✅ {label}: work {config.work_length_minutes}m, "
              f"ratio {config.break_to_work_ratio:.3f}, "
              f"minimum break {config.minimum_break_minutes}m")

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
