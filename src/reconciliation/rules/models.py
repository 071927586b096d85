"""
Rule value objects.

A RuleSet is built once per run and passed explicitly to every check. All
types here are frozen, so a loaded rule set cannot change mid-run.
"""

from dataclasses import dataclass, field

from reconciliation.errors import ConfigError


@dataclass(frozen=True)
class PrefixRule:
    """Rewrite ``prefix`` at the start of a device id into ``replacement``."""

    prefix: str
    replacement: str

    def __post_init__(self):
        if not self.prefix:
            raise ConfigError("Invalid device mapping: prefix is required")

    def __str__(self) -> str:
        return f"{self.prefix} → {self.replacement}"


@dataclass(frozen=True)
class SplitColumnRule:
    """
    One excel column that the csv export splits into two columns.

    ``primary_column`` (raw) must mirror the excel value; ``secondary_column``
    (LG) carries the value only when it contains special characters.
    """

    source_column: str
    primary_column: str
    secondary_column: str
    description: str = ""

    def __post_init__(self):
        if not self.source_column or not self.source_column.strip():
            raise ConfigError("Invalid rule: excelColumn is required")
        if not self.primary_column or not self.primary_column.strip():
            raise ConfigError(f"Invalid rule for {self.source_column}: rawColumn is required")
        if not self.secondary_column or not self.secondary_column.strip():
            raise ConfigError(f"Invalid rule for {self.source_column}: lgColumn is required")

    def __str__(self) -> str:
        return f"{self.source_column} ({self.primary_column}, {self.secondary_column})"


@dataclass(frozen=True)
class RuleSet:
    """Ordered prefix rules and split-column rules for one run."""

    prefix_rules: tuple[PrefixRule, ...] = field(default_factory=tuple)
    split_rules: tuple[SplitColumnRule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists from callers but store tuples.
        object.__setattr__(self, "prefix_rules", tuple(self.prefix_rules or ()))
        object.__setattr__(self, "split_rules", tuple(self.split_rules or ()))

    def validate(self) -> "RuleSet":
        """
        Check that both rule lists are populated.

        Returns:
            self, so loading and validating can be chained

        Raises:
            ConfigError: If either list is empty
        """
        if not self.prefix_rules:
            raise ConfigError("No device mappings found in configuration")
        if not self.split_rules:
            raise ConfigError("No column split validations defined in config")
        return self

    def summary(self) -> str:
        """Numbered listing of all rules for logs and the ``rules`` command."""
        lines = ["Device-to-Entity Mappings:"]
        if not self.prefix_rules:
            lines.append("  (No mappings defined)")
        for i, rule in enumerate(self.prefix_rules, 1):
            lines.append(f"  [{i}] {rule.prefix} → {rule.replacement}")

        lines.append("Column Split Validations:")
        if not self.split_rules:
            lines.append("  (No validations defined)")
        for i, rule in enumerate(self.split_rules, 1):
            lines.append(
                f"  [{i}] {rule.source_column} → {rule.primary_column} + {rule.secondary_column}"
            )

        return "\n".join(lines)
