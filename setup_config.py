#!/usr/bin/env python3
# Area: Shared
"""
Ringside - Configuration Setup Script
=====================================

Interactive script to generate config.json and .env files.

Usage:
    python setup_config.py
"""

import json
from pathlib import Path

from ringside import EngineConfig, ConfigurationError
from ringside._config import ENV_MAPPINGS


def prompt(question: str, default: str = "", required: bool = True) -> str:
    """Prompt user for input with optional default value."""
    if default:
        display = f"{question} [{default}]: "
    else:
        display = f"{question}: "

    while True:
        value = input(display).strip()
        if not value and default:
            return default
        if value:
            return value
        if not required:
            return ""
        print("  This field is required. Please enter a value.")


def print_header():
    """Print welcome header."""
    print()
    print("=" * 60)
    print("  Ringside - Configuration Setup")
    print("=" * 60)
    print()
    print("This script will help you create config.json and .env files.")
    print("Press Enter to accept default values shown in [brackets].")
    print()


def print_section(title: str):
    """Print section header."""
    print()
    print(f"--- {title} ---")
    print()


def get_config_values() -> dict:
    """Interactively collect configuration values."""
    defaults = EngineConfig()
    config = {}

    print_section("Database")
    config["database_path"] = prompt("SQLite database file", default=defaults.database_path)
    config["busy_timeout_seconds"] = float(prompt(
        "Seconds to wait for a competing writer", default=str(defaults.busy_timeout_seconds)
    ))

    print_section("Logging")
    config["log_file"] = prompt(
        "JSON log file (blank disables file logging)", default="", required=False
    ) or None
    config["log_level"] = prompt("Log level", default=defaults.log_level)

    # Validate before writing anything
    return EngineConfig(**config).model_dump()


def write_config_json(config: dict, path: Path) -> None:
    """Write config.json file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
    print(f"  Created: {path}")


def write_env_file(config: dict, path: Path) -> None:
    """Write .env file."""
    lines = []
    for env_key, config_key in ENV_MAPPINGS.items():
        if config.get(config_key) not in (None, ""):
            lines.append(f"{env_key}={config[config_key]}")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    print(f"  Created: {path}")


def main():
    """Main entry point."""
    print_header()

    try:
        config = get_config_values()
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        return 1
    except (ValueError, ConfigurationError) as e:
        print(f"\nInvalid value: {e}")
        return 1

    print_section("Generating Files")

    base_path = Path.cwd()
    write_config_json(config, base_path / "config.json")
    write_env_file(config, base_path / ".env")

    print()
    print("=" * 60)
    print("  Setup Complete!")
    print("=" * 60)
    print()
    print("Next steps:")
    print()
    print("  1. Create the database:")
    print("     python -m ringside --config config.json init")
    print()
    print("  2. Add a wrestler and employ them:")
    print('     python -m ringside create wrestler "Bret Hart"')
    print("     python -m ringside transition wrestler 1 employ --date 2024-01-01")
    print()
    return 0


if __name__ == "__main__":
    exit(main())
