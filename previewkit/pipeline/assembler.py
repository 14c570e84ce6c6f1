"""
Document Assembler - splice compiled script and style into index.html.

Markers are literal substrings. Only the first occurrence of the first marker
found is replaced, and a missing marker leaves the markup untouched.
"""

from typing import Iterable, Optional, Tuple

from previewkit.pipeline.resolver import InjectionMarkers


def style_block(style: str) -> str:
    return f"<style>{style}</style>"


def script_block(code: str, script_type: Optional[str] = None) -> str:
    if script_type:
        return f'<script type="{script_type}">{code}</script>'
    return f"<script>{code}</script>"


def find_marker(markup: str, markers: Iterable[str]) -> Optional[str]:
    """Return the first marker that occurs in the markup, or None."""
    for marker in markers:
        if marker and marker in markup:
            return marker
    return None


def _module_type(marker: str) -> Optional[str]:
    return "module" if 'type="module"' in marker else None


def inject(markup: str, markers: Tuple[str, ...], block: str) -> str:
    """Replace the first present marker with block. No marker, no change."""
    marker = find_marker(markup, markers)
    if marker is None:
        return markup
    return markup.replace(marker, block, 1)


def assemble(
    base_markup: str,
    script: Optional[str],
    style: Optional[str],
    markers: InjectionMarkers,
    script_type: Optional[str] = None,
) -> str:
    """
    Build the previewable document.

    Args:
        base_markup: Content of index.html
        script: Script to inline, or None to leave script tags alone
        style: Stylesheet to inline, or None to leave the link tag alone
        markers: Style and script markers to look for
        script_type: Explicit type attribute for the inline script

    Returns:
        The complete HTML document
    """
    html = base_markup

    if style is not None:
        html = inject(html, markers.style, style_block(style))

    if script is not None:
        marker = find_marker(html, markers.script)
        if marker is not None:
            block = script_block(script, script_type or _module_type(marker))
            html = html.replace(marker, block, 1)

    return html
