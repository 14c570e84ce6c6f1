"""
Framework Resolver - decide which files a framework builds from.

The resolver is a pure lookup over the source set. It picks the markup
document, the optional stylesheet and the entry script (or component), and
works out which literal tags in index.html mark where they get injected.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from previewkit.errors import MissingEntryError
from previewkit.schemas import FileRecord, Framework, SourceSet


# =============================================================================
# CONSTANTS
# =============================================================================

INDEX_FILE = "index.html"
DEFAULT_STYLE_FILE = "style.css"
DEFAULT_SCRIPT_FILE = "script.js"

# Entry suffixes in preference order. Insertion order breaks ties within a suffix.
ENTRY_SUFFIXES = {
    Framework.REACT: (".jsx", ".tsx", ".js"),
    Framework.VUE: (".vue", ".js"),
    Framework.SVELTE: (".svelte", ".js"),
}

COMPONENT_SUFFIXES = {
    Framework.VUE: ".vue",
    Framework.SVELTE: ".svelte",
}

# Placeholders of the versioned template scheme, checked before the literal tags.
STYLE_PLACEHOLDER = "{{STYLE}}"
SCRIPT_PLACEHOLDER = "{{SCRIPT}}"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class InjectionMarkers:
    """Literal substrings of index.html that the assembler replaces."""
    style: Tuple[str, ...] = ()
    script: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EntrySelection:
    """Files chosen for one build."""
    framework: Framework
    markup: FileRecord
    style: Optional[FileRecord] = None
    entry: Optional[FileRecord] = None
    companion: Optional[FileRecord] = None
    markers: InjectionMarkers = field(default_factory=InjectionMarkers)

    @property
    def entry_is_component(self) -> bool:
        suffix = COMPONENT_SUFFIXES.get(self.framework)
        return bool(suffix and self.entry and self.entry.name.endswith(suffix))


# =============================================================================
# MARKERS
# =============================================================================

def stylesheet_marker(style_name: str) -> str:
    """The exact <link> tag that stands in for a stylesheet."""
    return f'<link rel="stylesheet" href="{style_name}">'


def script_markers(script_name: str) -> Tuple[str, ...]:
    """The exact <script> tags that stand in for a script, in match order."""
    return (
        f'<script src="{script_name}"></script>',
        f'<script type="text/babel" src="{script_name}"></script>',
        f'<script type="module" src="{script_name}"></script>',
    )


def _build_markers(style: Optional[FileRecord], scripts: Iterable[Optional[FileRecord]]) -> InjectionMarkers:
    style_markers: Tuple[str, ...] = (STYLE_PLACEHOLDER,)
    if style is not None:
        style_markers += (stylesheet_marker(style.name),)

    script_literals: Tuple[str, ...] = (SCRIPT_PLACEHOLDER,)
    for record in scripts:
        if record is not None:
            script_literals += script_markers(record.name)

    return InjectionMarkers(style=style_markers, script=script_literals)


# =============================================================================
# LOOKUPS
# =============================================================================

def first_with_suffix(files: SourceSet, suffix: str) -> Optional[FileRecord]:
    """Return the first file, in insertion order, whose name ends with suffix."""
    for name, record in files.items():
        if name.endswith(suffix):
            return record
    return None


def _preferred(files: SourceSet, preferred_name: str, suffix: str) -> Optional[FileRecord]:
    if preferred_name in files:
        return files[preferred_name]
    return first_with_suffix(files, suffix)


def find_entry(files: SourceSet, framework: Framework) -> Optional[FileRecord]:
    """
    Find the entry file for a component framework.

    Suffixes are tried in preference order (for React: .jsx, then .tsx,
    then .js); within one suffix the first file in insertion order wins.
    """
    for suffix in ENTRY_SUFFIXES.get(framework, ()):
        record = first_with_suffix(files, suffix)
        if record is not None:
            return record
    return None


# =============================================================================
# RESOLVER
# =============================================================================

def resolve(framework: Framework, files: SourceSet) -> EntrySelection:
    """
    Select the files a framework builds from.

    Args:
        framework: Target framework
        files: The source set for this build

    Returns:
        EntrySelection describing markup, style, entry and markers

    Raises:
        MissingEntryError: If index.html or a required entry file is missing
    """
    markup = files.get(INDEX_FILE)
    if markup is None:
        raise MissingEntryError(f"{INDEX_FILE} is required", file=INDEX_FILE)

    style = _preferred(files, DEFAULT_STYLE_FILE, ".css")

    if framework == Framework.VANILLA:
        script = _preferred(files, DEFAULT_SCRIPT_FILE, ".js")
        return EntrySelection(
            framework=framework,
            markup=markup,
            style=style,
            entry=script,
            markers=_build_markers(style, [script]),
        )

    entry = find_entry(files, framework)
    if entry is None:
        expected = " or ".join(ENTRY_SUFFIXES[framework])
        raise MissingEntryError(
            f"No entry file ({expected}) found for {framework.value}",
            file=DEFAULT_SCRIPT_FILE,
        )

    companion = None
    component_suffix = COMPONENT_SUFFIXES.get(framework)
    if component_suffix and entry.name.endswith(component_suffix):
        companion = _preferred(files, DEFAULT_SCRIPT_FILE, ".js")

    return EntrySelection(
        framework=framework,
        markup=markup,
        style=style,
        entry=entry,
        companion=companion,
        markers=_build_markers(style, [entry, companion]),
    )
