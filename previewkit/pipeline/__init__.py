"""
Build steps of the preview pipeline.

Components:
- resolver: pick markup, style and entry files for a framework
- classifier: decide whether the entry needs the full compiler
- transformer: in-process build for simple sources
- assembler: splice script and style into index.html
"""

from previewkit.pipeline.resolver import (
    EntrySelection,
    InjectionMarkers,
    resolve,
    find_entry,
)
from previewkit.pipeline.classifier import needs_full_compile
from previewkit.pipeline.transformer import (
    TransformResult,
    transform,
    extract_sfc_blocks,
    sfc_to_script,
)
from previewkit.pipeline.assembler import assemble

__all__ = [
    # Resolver
    "EntrySelection",
    "InjectionMarkers",
    "resolve",
    "find_entry",
    # Classifier
    "needs_full_compile",
    # Transformer
    "TransformResult",
    "transform",
    "extract_sfc_blocks",
    "sfc_to_script",
    # Assembler
    "assemble",
]
