"""
Site checks for site_auditor.

Importing this package registers every built-in rule with RuleRegistry.
"""

from site_auditor.rules.base import BaseRule, FileRule, ProjectRule, RuleRegistry, UnknownCheck
from site_auditor.rules.markup import (
    BrokenLinkRule,
    InvalidMailtoRule,
    MissingAltRule,
    MissingFaviconRule,
    MissingFooterRule,
)
from site_auditor.rules.content import (
    ConsoleStatementRule,
    DotHtmlLinkRule,
    EmptyFileRule,
    GlobalVariableRule,
    HtmlCommentRule,
    InsecureUrlRule,
    OldDomainRule,
)
from site_auditor.rules.project import (
    MissingImageRule,
    MissingIndexFileRule,
    SuspiciousFileRule,
    UnusedImageRule,
)

__all__ = [
    "BaseRule",
    "FileRule",
    "ProjectRule",
    "RuleRegistry",
    "UnknownCheck",
    "BrokenLinkRule",
    "InvalidMailtoRule",
    "MissingAltRule",
    "MissingFaviconRule",
    "MissingFooterRule",
    "ConsoleStatementRule",
    "DotHtmlLinkRule",
    "EmptyFileRule",
    "GlobalVariableRule",
    "HtmlCommentRule",
    "InsecureUrlRule",
    "OldDomainRule",
    "MissingImageRule",
    "MissingIndexFileRule",
    "SuspiciousFileRule",
    "UnusedImageRule",
]
