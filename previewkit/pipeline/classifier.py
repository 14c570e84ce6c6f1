"""
Complexity Classifier - decide whether a source needs the full compiler.

This is a coarse textual heuristic, not a parser. False positives only cost
a trip to the out-of-process compiler; false negatives are caught by the
browser runtime or by the in-process fallback.
"""

import re

from previewkit.schemas import Framework


# More lines than this always goes to the full compiler.
MAX_SIMPLE_LINES = 100

JSX_COMPLEX_PATTERNS = (
    re.compile(r"^\s*import[\s{*'\"]", re.MULTILINE),
    re.compile(r"\binterface\s+[A-Za-z_$]"),
    re.compile(r"\btype\s+[A-Za-z_$][\w$]*\s*(<[^>]*>)?\s*="),
    re.compile(r"\)\s*:\s*[A-Za-z_$][\w$.<>\[\]|]*\s*(=>|\{)"),
)

VUE_TEMPLATE_RE = re.compile(r"<template[\s>]")
VUE_SCOPED_STYLE_RE = re.compile(r"<style\b[^>]*\bscoped\b[^>]*>")

SVELTE_SCRIPT_RE = re.compile(r"<script[\s>]")
SVELTE_STYLE_RE = re.compile(r"<style[\s>]")


def _line_count(source: str) -> int:
    return source.count("\n") + 1


def needs_full_compile(source: str, framework: Framework) -> bool:
    """
    Check if an entry source is too complex for the in-process transform.

    Args:
        source: Entry file content
        framework: Target framework

    Returns:
        True if the out-of-process compiler should be tried first
    """
    if framework == Framework.REACT:
        if _line_count(source) > MAX_SIMPLE_LINES:
            return True
        return any(pattern.search(source) for pattern in JSX_COMPLEX_PATTERNS)

    if framework == Framework.VUE:
        return bool(VUE_TEMPLATE_RE.search(source) or VUE_SCOPED_STYLE_RE.search(source))

    if framework == Framework.SVELTE:
        return bool(SVELTE_SCRIPT_RE.search(source) and SVELTE_STYLE_RE.search(source))

    return False
