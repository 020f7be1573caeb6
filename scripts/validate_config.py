#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from finagg_app.config.loader import ConfigLoader
from finagg_app.config.validation import ConfigValidator
from finagg_app.errors import ConfigurationError


def validate(config_dir: Optional[Path]) -> bool:
    """Validate the merged configuration; returns True when it is usable."""
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating configuration in {loader.config_dir}...")

    try:
        config = loader.merge_config()
    except ConfigurationError as e:
        print(f"❌ Could not load configuration: {e}")
        return False

    errors = ConfigValidator.validate_config(config)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        return False

    print("✅ Settings are valid")

    if not config["provider"].get("token"):
        print("⚠️  No provider token configured; set TUSHARE_TOKEN before fetching data")

    return True


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate finagg configuration")
    parser.add_argument("--config-dir", type=Path, help="Directory holding settings.yaml")
    args = parser.parse_args()

    if validate(args.config_dir):
        print("\n🎉 Configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
