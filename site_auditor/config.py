"""
Configuration constants and loading utilities for site_auditor.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from site_auditor.errors import ConfigError


DEFAULT_EXCLUDE = [
    "node_modules",
    "vendor",
    ".git",
    ".svn",
    ".idea",
    ".vscode",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    ".next",
    "coverage",
    ".cache",
]


DEFAULT_CONFIG: dict[str, Any] = {
    # Token that suppresses a match on the line it appears on
    "ignore_marker": "#evIgnore",

    # Exclusions shared by every traversal
    "exclude": {
        "directories": list(DEFAULT_EXCLUDE),
        "patterns": ["*.min.js", "*.min.css", "*.map"],
    },

    "extensions": {
        # Files the per-file rules evaluate
        "markup": [".html", ".htm", ".php", ".js", ".jsx"],
        # Files searched for image references by the project index
        "references": [".html", ".htm", ".php", ".js", ".jsx", ".ts", ".tsx", ".css"],
        # Files that are expected to be full documents (footer, favicon)
        "structure": [".html", ".htm", ".php"],
        "images": [".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico", ".bmp", ".avif"],
    },

    "empty_files": {
        "ignore_files": ["index.php", ".gitkeep", ".keep"],
    },

    "global_variables": {
        "names": ["$GLOBALS", "$_REQUEST"],
        "ignore_files": ["config.php", "config.js"],
    },

    "deprecated_domains": {
        "domains": [],
    },

    "insecure_urls": {
        "allow_prefixes": ["http://www.w3.org/"],
    },

    "broken_links": {
        "timeout": 10.0,
        "max_workers": 8,
        "user_agent": "site-auditor link checker",
    },

    "index_file": {
        "name": "index.php",
        "content": "<?php\n// Auto-generated index.php\n?>",
    },

    "suspicious_files": {
        "names": ["test", "temp", "tmp", "sample", "example", "demo"],
        "extensions": ["php", "js", "jsx", "ts", "tsx", "txt"],
    },
}


def load_config(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from YAML file, merged with defaults.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Configuration dictionary with user values merged over defaults.

    Raises:
        ConfigError: If the file can't be read or isn't a YAML mapping.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Could not read config file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in '{config_path}': {e}") from e

    if not isinstance(user_config, dict):
        raise ConfigError(f"Config file '{config_path}' must contain a mapping")

    return merge_config(user_config)


def merge_config(user_config: dict[str, Any]) -> dict[str, Any]:
    """Merge user values over a private copy of the defaults (one level deep)."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in user_config.items():
        if isinstance(value, dict) and key in config and isinstance(config[key], dict):
            config[key] = {**config[key], **value}
        else:
            config[key] = value
    return config


def get_exclude(config: dict[str, Any]) -> list[str]:
    """Directory names plus file patterns, in the form should_exclude takes."""
    exclude = config.get("exclude", {})
    return list(exclude.get("directories") or []) + list(exclude.get("patterns") or [])


def normalize_extensions(extensions: list[str]) -> frozenset[str]:
    """Lowercase extensions and give each a leading dot."""
    normalized = set()
    for ext in extensions or []:
        ext = ext.lower()
        if not ext.startswith("."):
            ext = "." + ext
        normalized.add(ext)
    return frozenset(normalized)


def get_config_template() -> str:
    """Generate a documented YAML config template."""
    return '''# =============================================================================
# Site Auditor Configuration
# =============================================================================
# Values here are merged over the built-in defaults, one section at a time.
# Run with:  site-audit ./my-site --config this_file.yaml
# =============================================================================

# Token that silences a finding on the line it appears on, e.g.
#   <img src="spacer.gif"> <!-- #evIgnore -->
ignore_marker: "#evIgnore"

# =============================================================================
# EXCLUSIONS
# =============================================================================
exclude:
  # Directory names that are never descended into
  directories:
    - node_modules
    - vendor
    - .git
    - dist
    - build
  # File patterns skipped everywhere ("*" prefix = suffix match)
  patterns:
    - "*.min.js"
    - "*.min.css"
    - "*.map"

# =============================================================================
# FILE TYPES
# =============================================================================
extensions:
  markup: [".html", ".htm", ".php", ".js", ".jsx"]
  references: [".html", ".htm", ".php", ".js", ".jsx", ".ts", ".tsx", ".css"]
  structure: [".html", ".htm", ".php"]
  images: [".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico", ".bmp", ".avif"]

# =============================================================================
# RULES
# =============================================================================
empty_files:
  ignore_files:
    - index.php
    - .gitkeep

global_variables:
  # Names flagged wherever they appear
  names:
    - "$GLOBALS"
    - "$_REQUEST"
    # - "window.appState"
  ignore_files:
    - config.php
    - config.js

deprecated_domains:
  domains:
    # - old-brand.example.com

insecure_urls:
  # http:// URLs starting with these prefixes are not reported
  allow_prefixes:
    - "http://www.w3.org/"

broken_links:
  timeout: 10
  max_workers: 8

# WARNING: the missing-index-files check WRITES this file into every
# directory that lacks one. Use --read-only to scan without writing.
index_file:
  name: index.php

suspicious_files:
  names: [test, temp, tmp, sample, example, demo]
  extensions: [php, js, jsx, ts, tsx, txt]
'''
