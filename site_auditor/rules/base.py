"""
Base rule classes and registry for site checks.

To add a new check:
1. Add its identifier to ``Check``
2. Create a class inheriting from FileRule (runs once per scanned file) or
   ProjectRule (runs once per scan)
3. Register it with the @RuleRegistry.register decorator

Example:
    @RuleRegistry.register(Check.MISSING_ALT)
    class MissingAltRule(FileRule):
        def evaluate(self, source, index):
            ...
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from site_auditor.config import normalize_extensions
from site_auditor.models import ALL_CHECKS, Check, Finding, FindingKind
from site_auditor.utils import has_marker

if TYPE_CHECKING:
    from typing import Any, Callable, Iterable, Type

    from site_auditor.loader import SourceFile
    from site_auditor.models import ProjectIndex
    from site_auditor.probe import Probe

logger = logging.getLogger(__name__)


class UnknownCheck(ValueError):
    """A check identifier that isn't registered."""


class RuleRegistry:
    """
    Registry mapping check identifiers to rule classes.

    "all" expands to every registered check in ``Check`` declaration order.
    """

    _rule_classes: ClassVar[dict[Check, Type["BaseRule"]]] = {}

    @classmethod
    def register(cls, check: Check) -> Callable[[Type["BaseRule"]], Type["BaseRule"]]:
        """Decorator to register a rule class for ``check``."""
        def decorator(rule_class: Type["BaseRule"]) -> Type["BaseRule"]:
            rule_class.check = check
            cls._rule_classes[check] = rule_class
            logger.debug("Registered rule for %s: %s", check.value, rule_class.__name__)
            return rule_class
        return decorator

    @classmethod
    def list_checks(cls) -> list[Check]:
        """Registered checks in run order."""
        return [check for check in Check if check in cls._rule_classes]

    @classmethod
    def resolve(cls, selection: Iterable[str], read_only: bool = False) -> list[Check]:
        """
        Expand a selection of identifiers into checks, in run order.

        Args:
            selection: Check identifiers and/or "all".
            read_only: Drop checks that write to disk.

        Raises:
            UnknownCheck: For identifiers that aren't registered.
        """
        wanted: set[Check] = set()
        for item in selection:
            value = item.value if isinstance(item, Check) else str(item).strip()
            if value == ALL_CHECKS:
                wanted.update(cls.list_checks())
                continue
            try:
                check = Check(value)
            except ValueError:
                raise UnknownCheck(f"Unknown check '{value}'") from None
            if check not in cls._rule_classes:
                raise UnknownCheck(f"No rule registered for '{value}'")
            wanted.add(check)

        checks = [check for check in cls.list_checks() if check in wanted]
        if read_only:
            writing = [c for c in checks if cls._rule_classes[c].writes_files]
            for check in writing:
                logger.warning("Skipping %s: it writes files and the scan is read-only", check.value)
            checks = [c for c in checks if c not in writing]
        return checks

    @classmethod
    def create(
        cls,
        check: Check,
        config: dict[str, Any],
        probe: Probe | None = None,
    ) -> "BaseRule":
        """Instantiate and configure the rule for ``check``."""
        rule = cls._rule_classes[check]()
        rule.configure(config)
        if rule.uses_probe:
            rule.probe = probe
        return rule


class BaseRule(ABC):
    """Common configuration handling for all rules."""

    check: ClassVar[Check]
    # Reads the project index
    needs_index: ClassVar[bool] = False
    # Mutates the scanned tree
    writes_files: ClassVar[bool] = False
    # Needs a reachability probe
    uses_probe: ClassVar[bool] = False

    def __init__(self) -> None:
        self.config: dict[str, Any] = {}
        self.ignore_marker = ""
        self.probe: Probe | None = None

    def configure(self, config: dict[str, Any]) -> None:
        """
        Configure the rule.

        Subclasses override to pull their own settings, calling super().

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        self.ignore_marker = config.get("ignore_marker", "") or ""

    def is_ignored(self, line: str) -> bool:
        return has_marker(line, self.ignore_marker)

    @property
    def name(self) -> str:
        return self.check.value


class FileRule(BaseRule):
    """A check evaluated against one loaded file at a time."""

    # Config key under "extensions" restricting which files the rule sees
    extensions_key: ClassVar[str | None] = None

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        self.extensions: frozenset[str] | None = None
        if self.extensions_key:
            self.extensions = normalize_extensions(
                config.get("extensions", {}).get(self.extensions_key, [])
            )

    def applies_to(self, source: SourceFile) -> bool:
        return self.extensions is None or source.suffix in self.extensions

    @abstractmethod
    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        """
        Check one file.

        Args:
            source: Loaded file (raw text plus parsed document).
            index: Project index when the scan built one.

        Returns:
            Findings for this file, in document order.
        """
        ...

    @staticmethod
    def finding(
        source: SourceFile,
        kind: FindingKind,
        message: str,
        line: int | None = None,
        key: tuple[Any, ...] | None = None,
    ) -> Finding:
        return Finding(
            file_path=str(source.path),
            file_name=source.name,
            kind=kind,
            message=message,
            line_number=line,
            dedupe_key=key,
        )


class ProjectRule(BaseRule):
    """A check evaluated once per scan against the whole tree."""

    @abstractmethod
    def run(self, root: Path, index: ProjectIndex | None) -> list[Finding]:
        """
        Check the project.

        Args:
            root: Resolved scan root.
            index: Project index when ``needs_index`` is set.

        Returns:
            Findings for the project.
        """
        ...
