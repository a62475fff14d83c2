"""User-facing settings for the ratcalc CLI.

The evaluation core never reads settings; the CLI resolves them and passes
rule sets explicitly on every call.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import yaml

from ratcalc.fixer import FixRule
from ratcalc.validator import CheckRule

DEFAULT_PRECISION = 20
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})

RuleT = TypeVar("RuleT", bound=Enum)


def parse_rules(rule_type: type[RuleT], names: str | Iterable[str] | None) -> frozenset[RuleT]:
    """Parse rule names such as "block-product" into enum members.

    Accepts a comma-separated string or a list of names. Names are
    case-insensitive and may use underscores instead of dashes.

    Raises:
        ValueError: For unknown rule names or values that are not names
    """
    if names is None:
        return frozenset()
    if isinstance(names, str):
        names = names.split(",")
    elif not isinstance(names, (list, tuple, set, frozenset)):
        raise ValueError(
            f"Expected {rule_type.__name__} names as a string or list, got '{names}'"
        )

    rules = set()
    for name in names:
        key = str(name).strip().lower().replace("_", "-")
        if not key:
            continue
        try:
            rules.add(rule_type(key))
        except ValueError:
            valid = ", ".join(member.value for member in rule_type)
            raise ValueError(
                f"Unknown {rule_type.__name__} '{name}'. Expected one of: {valid}"
            ) from None
    return frozenset(rules)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean, got '{value}'")


def _parse_precision(value: Any) -> int:
    try:
        precision = int(value)
    except TypeError:
        raise ValueError(f"precision must be an integer, got '{value}'") from None
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")
    return precision


@dataclass
class Settings:
    """Evaluation settings chosen by the user.

    Attributes:
        fix_rules: Fix rules applied to every expression
        check_rules: Check rules enforced on every expression
        decimal: Also render results as decimals
        precision: Fractional digits of the decimal rendering
        log_level: Logging level name for the CLI
    """

    fix_rules: frozenset[FixRule] = field(default_factory=frozenset)
    check_rules: frozenset[CheckRule] = field(default_factory=frozenset)
    decimal: bool = False
    precision: int = DEFAULT_PRECISION
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_mapping(cls, data: dict[str, Any], base: Settings | None = None) -> Settings:
        """Create settings from a mapping, keeping base values for missing keys."""
        settings = base or cls()
        changes: dict[str, Any] = {}

        if "fix_rules" in data:
            changes["fix_rules"] = parse_rules(FixRule, data["fix_rules"])
        if "check_rules" in data:
            changes["check_rules"] = parse_rules(CheckRule, data["check_rules"])
        if "decimal" in data:
            changes["decimal"] = _parse_bool(data["decimal"])
        if "precision" in data:
            changes["precision"] = _parse_precision(data["precision"])
        if "log_level" in data:
            changes["log_level"] = str(data["log_level"]).upper()

        return replace(settings, **changes)

    @classmethod
    def from_env(cls, base: Settings | None = None) -> Settings:
        """Create settings from environment variables.

        Variables:
        - RATCALC_FIX_RULES: comma-separated fix rules
        - RATCALC_CHECK_RULES: comma-separated check rules
        - RATCALC_DECIMAL: render decimals (1/0, true/false)
        - RATCALC_PRECISION: decimal digits
        - RATCALC_LOG_LEVEL: logging level name
        """
        env_keys = {
            "fix_rules": "RATCALC_FIX_RULES",
            "check_rules": "RATCALC_CHECK_RULES",
            "decimal": "RATCALC_DECIMAL",
            "precision": "RATCALC_PRECISION",
            "log_level": "RATCALC_LOG_LEVEL",
        }
        data = {
            key: os.environ[name] for key, name in env_keys.items() if name in os.environ
        }
        return cls.from_mapping(data, base)

    @classmethod
    def from_file(cls, path: Path, base: Settings | None = None) -> Settings:
        """Create settings from a YAML file.

        Example file:
            fix_rules: [block-product, close-blocks]
            check_rules: [deny-division]
            decimal: true
            precision: 10
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls.from_mapping(data, base)
