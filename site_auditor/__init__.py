"""
Site Auditor - find content problems in static HTML/PHP/JS projects.

Walks a project directory, runs a configurable set of checks (missing alt
text, broken links, leftover comments, missing or unused images, insecure
URLs, ...) and reports findings with file and line positions.
"""

__version__ = "1.0.0"

from site_auditor.config import DEFAULT_CONFIG, DEFAULT_EXCLUDE
from site_auditor.errors import DirectoryNotFound
from site_auditor.models import Check, Finding, FindingKind, ScanRequest
from site_auditor.scanner import SiteScanner, scan_site

__all__ = [
    "SiteScanner",
    "scan_site",
    "ScanRequest",
    "Finding",
    "FindingKind",
    "Check",
    "DirectoryNotFound",
    "DEFAULT_CONFIG",
    "DEFAULT_EXCLUDE",
    "__version__",
]
