#!/usr/bin/env python3
"""Simple script to verify config.example.yaml structure without importing the package."""

import yaml
from pathlib import Path

VALID_KINDS = ["scalar", "multiset", "structured-security", "structured-protection"]


def verify_config_structure(config_file: Path = Path("config.example.yaml")) -> bool:
    """Verify a configuration file has the expected structure."""
    if not config_file.exists():
        print(f"✗ {config_file} not found")
        return False

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"✗ Failed to parse {config_file}: {e}")
        return False

    if not isinstance(config, dict):
        print(f"✗ {config_file} must contain a mapping at the top level")
        return False

    errors = []
    field_names = []

    # Check fields structure
    fields = config.get("fields", [])
    if not isinstance(fields, list):
        errors.append("'fields' must be a list")
    else:
        for idx, entry in enumerate(fields):
            if isinstance(entry, str):
                field_names.append(entry)
            elif isinstance(entry, dict):
                if "name" not in entry:
                    errors.append(f"Field {idx} missing key: name")
                    continue
                field_names.append(entry["name"])
                if "kind" in entry and entry["kind"] not in VALID_KINDS:
                    errors.append(f"Field {idx} has invalid kind: {entry['kind']}")
            else:
                errors.append(f"Field {idx} must be a string or a dictionary")

        duplicates = sorted({name for name in field_names if field_names.count(name) > 1})
        if duplicates:
            errors.append(f"Fields listed more than once: {', '.join(duplicates)}")

    # Check thresholds
    deviation = config.get("deviation_settings", {})
    if not isinstance(deviation, dict):
        errors.append("'deviation_settings' must be a dictionary")
    else:
        for key in ("topic_missing_threshold", "topic_extra_threshold"):
            value = deviation.get(key, 0)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(f"'{key}' must be a non-negative integer")

    # Check optional sections have correct types
    for key in ("report_settings", "github", "logging"):
        if key in config and not isinstance(config[key], dict):
            errors.append(f"'{key}' must be of type dict")

    if errors:
        print(f"✗ {config_file} validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    print(f"✓ {config_file} structure is valid")
    print(f"  - {len(field_names)} fields configured")
    print(f"  - {len(deviation.get('ignore_fields', []))} ignored fields")
    return True


if __name__ == "__main__":
    import sys
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    success = verify_config_structure(path)
    sys.exit(0 if success else 1)
