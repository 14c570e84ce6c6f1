"""
In-Process Transformer - cheap, synchronous builds for simple sources.

- React: JSX is compiled with Babel running in an embedded JS interpreter
  (dukpy). If Babel rejects the source, it is shipped untransformed under
  type="text/babel" so the in-browser Babel runtime handles it at load time.
- Vue: a single-file component is taken apart by best-effort textual
  extraction (see extract_sfc_blocks). This is a bounded fallback for when
  the toolchain compiler is not used or not reachable, not a compiler.
- Everything else is injected verbatim.
"""

import json
import re
from dataclasses import dataclass
from typing import Optional

import dukpy

from previewkit.errors import TransformError
from previewkit.logging import get_logger
from previewkit.pipeline.resolver import EntrySelection
from previewkit.schemas import FileRecord, Framework

logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

BABEL_RUNTIME_TYPE = "text/babel"

VUE_MOUNT_SELECTOR = "#app"
SFC_COMPONENT_NAME = "__sfc__"

TEMPLATE_BLOCK_RE = re.compile(r"<template(?:\s[^>]*)?>(.*)</template>", re.DOTALL)
SCRIPT_BLOCK_RE = re.compile(r"<script(?:\s[^>]*)?>(.*?)</script>", re.DOTALL)
STYLE_BLOCK_RE = re.compile(r"<style(?:\s[^>]*)?>(.*?)</style>", re.DOTALL)
EXPORT_DEFAULT_RE = re.compile(r"\bexport\s+default\s+")


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class TransformResult:
    """Script and style ready for the Document Assembler."""
    script: Optional[str]
    style: Optional[str]
    script_type: Optional[str] = None
    degraded: bool = False


@dataclass(frozen=True)
class SfcBlocks:
    """Blocks of a single-file component. Missing blocks are empty strings."""
    template: str = ""
    script: str = ""
    style: str = ""


# =============================================================================
# JSX
# =============================================================================

def compile_jsx(source: str, filename: str = "script.jsx") -> str:
    """
    Compile JSX to plain JavaScript.

    Raises:
        TransformError: If Babel cannot parse the source
    """
    try:
        return dukpy.jsx_compile(source)
    except dukpy.JSRuntimeError as e:
        raise TransformError(f"JSX transform failed: {e}", file=filename) from e


def _transform_react(entry: FileRecord, style: Optional[str]) -> TransformResult:
    try:
        code = compile_jsx(entry.content, entry.name)
    except TransformError as e:
        logger.warning("%s; shipping %s for in-browser transform", e.message, entry.name)
        return TransformResult(
            script=entry.content,
            style=style,
            script_type=BABEL_RUNTIME_TYPE,
            degraded=True,
        )
    return TransformResult(script=code, style=style)


# =============================================================================
# SINGLE-FILE COMPONENTS
# =============================================================================

def extract_sfc_blocks(source: str) -> SfcBlocks:
    """
    Pull the template, script and style blocks out of a single-file component.

    This is pattern matching, not parsing. The template is everything between
    the first <template> and the last </template>, so nested templates survive;
    script and style take the first block of each. A block that is missing or
    malformed comes back as an empty string.
    """
    template = TEMPLATE_BLOCK_RE.search(source)
    script = SCRIPT_BLOCK_RE.search(source)
    style = STYLE_BLOCK_RE.search(source)
    return SfcBlocks(
        template=template.group(1).strip() if template else "",
        script=script.group(1).strip() if script else "",
        style=style.group(1).strip() if style else "",
    )


def _js_string(text: str) -> str:
    return json.dumps(text).replace("</", "<\\/")


def sfc_to_script(source: str, mount_selector: str = VUE_MOUNT_SELECTOR) -> str:
    """
    Turn a Vue single-file component into a script for the global Vue build.

    The default export becomes a variable, the template is attached as a
    string option and a mount call is appended. <script setup>, scoped
    styles and src= blocks are not handled.
    """
    blocks = extract_sfc_blocks(source)

    script, replaced = EXPORT_DEFAULT_RE.subn(f"const {SFC_COMPONENT_NAME} = ", blocks.script, count=1)
    if not replaced:
        script = f"{script}\nconst {SFC_COMPONENT_NAME} = {{}};".lstrip()

    return "\n".join([
        script,
        f"{SFC_COMPONENT_NAME}.template = {_js_string(blocks.template)};",
        f"Vue.createApp({SFC_COMPONENT_NAME}).mount({_js_string(mount_selector)});",
    ])


def _merge_styles(*styles: Optional[str]) -> Optional[str]:
    parts = [s for s in styles if s]
    if not parts:
        return styles[0] if styles else None
    return "\n".join(parts)


def _transform_vue(selection: EntrySelection, style: Optional[str]) -> TransformResult:
    entry = selection.entry
    if not selection.entry_is_component:
        return TransformResult(script=entry.content, style=style)

    blocks = extract_sfc_blocks(entry.content)
    return TransformResult(
        script=sfc_to_script(entry.content),
        style=_merge_styles(style, blocks.style),
    )


def _transform_svelte(selection: EntrySelection, style: Optional[str]) -> TransformResult:
    # Without the compiler a component cannot run; the companion script can.
    if selection.entry_is_component and selection.companion is not None:
        return TransformResult(script=selection.companion.content, style=style)
    return TransformResult(script=selection.entry.content, style=style)


# =============================================================================
# TRANSFORMER
# =============================================================================

def transform(framework: Framework, selection: EntrySelection) -> TransformResult:
    """
    Build script and style for a resolved selection without leaving the process.

    Args:
        framework: Target framework
        selection: Output of the resolver

    Returns:
        TransformResult for the Document Assembler
    """
    style = selection.style.content if selection.style is not None else None

    if framework == Framework.VANILLA or selection.entry is None:
        script = selection.entry.content if selection.entry is not None else None
        return TransformResult(script=script, style=style)

    if framework == Framework.REACT:
        return _transform_react(selection.entry, style)

    if framework == Framework.VUE:
        return _transform_vue(selection, style)

    return _transform_svelte(selection, style)
