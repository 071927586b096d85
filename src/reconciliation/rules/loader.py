"""
Rule file loading.

Rules live in two JSON documents kept next to the test data:

- ``device-entity-mappings-simplified.json``::

    {"deviceMappings": [{"prefix": "767", "replacement": "CCSMP"}, ...]}

- ``column-split-validations.json``::

    {"columnSplitValidations": [
        {"excelColumn": "Result", "rawColumn": "result_raw",
         "lgColumn": "result_lg", "description": "..."}, ...]}

Each file is located through an ordered list of search directories, parsed,
checked against a JSON schema, and turned into frozen rule objects.
"""

import json
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import jsonschema

from reconciliation.errors import ConfigError

from .models import PrefixRule, RuleSet, SplitColumnRule

logger = logging.getLogger(__name__)

DEVICE_MAPPINGS_FILENAME = "device-entity-mappings-simplified.json"
SPLIT_RULES_FILENAME = "column-split-validations.json"
CONFIG_DIR_ENV = "RECONCILE_CONFIG_DIR"

DEVICE_MAPPINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "deviceMappings": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "properties": {
                    "prefix": {"type": "string"},
                    "replacement": {"type": "string"},
                },
                "required": ["prefix", "replacement"],
            },
        },
    },
}

SPLIT_RULES_SCHEMA = {
    "type": "object",
    "properties": {
        "columnSplitValidations": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "properties": {
                    "excelColumn": {"type": ["string", "null"]},
                    "rawColumn": {"type": ["string", "null"]},
                    "lgColumn": {"type": ["string", "null"]},
                    "description": {"type": ["string", "null"]},
                },
            },
        },
    },
}


def default_search_dirs(config_dir: str | Path | None = None) -> list[Path]:
    """
    Directories searched for rule files, in priority order

    1. ``config_dir`` (from the command line)
    2. ``$RECONCILE_CONFIG_DIR``
    3. the current working directory
    4. ``./config``
    5. ``./src/test/resources`` (where the test suites keep them)
    """
    dirs = []
    if config_dir:
        dirs.append(Path(config_dir))
    if os.getenv(CONFIG_DIR_ENV):
        dirs.append(Path(os.environ[CONFIG_DIR_ENV]))

    cwd = Path.cwd()
    dirs.extend([cwd, cwd / "config", cwd / "src" / "test" / "resources"])
    return dirs


def find_config_file(
    filename: str,
    explicit_path: str | Path | None = None,
    search_dirs: Iterable[Path] | None = None,
) -> Path:
    """
    Resolve a rule file

    Args:
        filename: File name to look for in the search directories
        explicit_path: If given, only this path is considered
        search_dirs: Directories to search (default: ``default_search_dirs()``)

    Returns:
        Path of the first existing candidate

    Raises:
        ConfigError: If no candidate exists
    """
    if explicit_path is not None:
        path = Path(explicit_path)
        if not path.is_file():
            raise ConfigError(f"Rule file not found: {path}")
        return path

    candidates = [d / filename for d in (search_dirs if search_dirs is not None else default_search_dirs())]
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    searched = ", ".join(str(c.parent) for c in candidates)
    raise ConfigError(f"Could not find {filename} in any known location. Searched: {searched}")


def _read_document(path: Path, schema: dict[str, Any]) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read rule file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {path}: {e}") from e

    try:
        jsonschema.validate(instance=document, schema=schema)
    except jsonschema.exceptions.ValidationError as e:
        raise ConfigError(f"Invalid rule file {path}: {e.message}") from e

    return document


def parse_prefix_rules(document: Mapping[str, Any]) -> tuple[PrefixRule, ...]:
    """Build prefix rules from a parsed ``deviceMappings`` document, keeping order."""
    entries = document.get("deviceMappings") or []
    return tuple(PrefixRule(entry["prefix"], entry["replacement"]) for entry in entries)


def parse_split_rules(document: Mapping[str, Any]) -> tuple[SplitColumnRule, ...]:
    """Build split-column rules from a parsed ``columnSplitValidations`` document."""
    entries = document.get("columnSplitValidations") or []
    return tuple(
        SplitColumnRule(
            source_column=entry.get("excelColumn"),
            primary_column=entry.get("rawColumn"),
            secondary_column=entry.get("lgColumn"),
            description=entry.get("description") or "",
        )
        for entry in entries
    )


def load_prefix_rules(path: str | Path) -> tuple[PrefixRule, ...]:
    path = Path(path)
    rules = parse_prefix_rules(_read_document(path, DEVICE_MAPPINGS_SCHEMA))
    logger.info(f"Loaded {len(rules)} device mapping(s) from {path.resolve()}")
    return rules


def load_split_rules(path: str | Path) -> tuple[SplitColumnRule, ...]:
    path = Path(path)
    rules = parse_split_rules(_read_document(path, SPLIT_RULES_SCHEMA))
    logger.info(f"Loaded {len(rules)} column split rule(s) from {path.resolve()}")
    return rules


def load_rule_set(
    mappings_path: str | Path | None = None,
    split_rules_path: str | Path | None = None,
    config_dir: str | Path | None = None,
) -> RuleSet:
    """
    Locate, parse and build the rule set for a run

    The result is not validated for emptiness; call ``RuleSet.validate()``
    before classifying.

    Args:
        mappings_path: Explicit device mapping file
        split_rules_path: Explicit column split rule file
        config_dir: Extra directory searched before the defaults

    Raises:
        ConfigError: If a file is missing, malformed, or holds an invalid rule
    """
    search_dirs = default_search_dirs(config_dir)

    mappings_file = find_config_file(DEVICE_MAPPINGS_FILENAME, mappings_path, search_dirs)
    split_file = find_config_file(SPLIT_RULES_FILENAME, split_rules_path, search_dirs)

    return RuleSet(
        prefix_rules=load_prefix_rules(mappings_file),
        split_rules=load_split_rules(split_file),
    )
