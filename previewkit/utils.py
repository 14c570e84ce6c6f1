"""
Utility functions for previewkit: validation, export and display helpers.
"""

import io
import re
import zipfile
from pathlib import Path
from typing import List, Mapping, Union

from previewkit.errors import PreviewError
from previewkit.pipeline.assembler import find_marker
from previewkit.pipeline.resolver import INDEX_FILE, resolve
from previewkit.schemas import FileRecord, Framework


def validate_files(framework: Union[Framework, str], files: Mapping[str, FileRecord]) -> List[str]:
    """
    List the problems that would stop a source set from previewing.

    Nothing is compiled; this only checks that the files the framework needs
    exist and that index.html has somewhere to put them.

    Args:
        framework: Framework identifier
        files: Source set to check

    Returns:
        Human-readable problems, empty when the set looks buildable
    """
    try:
        framework = Framework.parse(framework)
        selection = resolve(framework, files)
    except PreviewError as e:
        if e.file == INDEX_FILE:
            return [f"{INDEX_FILE} is required"]
        if e.file == "unknown":
            return [e.message]
        return [f"An entry file is required for {framework.value} projects ({e.message})"]

    problems = []
    markup = selection.markup.content

    if selection.style is not None and find_marker(markup, selection.markers.style) is None:
        problems.append(
            f'{INDEX_FILE} has no <link rel="stylesheet" href="{selection.style.name}"> tag; '
            f"{selection.style.name} will not be applied"
        )

    script = selection.companion or selection.entry
    if script is not None and find_marker(markup, selection.markers.script) is None:
        problems.append(f"{INDEX_FILE} has no <script> tag for {script.name}; it will not run")

    return problems


def make_zip_bytes(files: Mapping[str, FileRecord]) -> bytes:
    """
    Create an in-memory ZIP archive from a source set.

    Args:
        files: Mapping of file names to file records

    Returns:
        Bytes of the ZIP archive
    """
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for path, record in files.items():
            # Normalize path separators
            normalized_path = path.replace("\\", "/").lstrip("/")
            zf.writestr(normalized_path, record.content)

    buffer.seek(0)
    return buffer.getvalue()


# Mapping of file extensions to language names for syntax highlighting
EXTENSION_LANGUAGE_MAP = {
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".json": "json",
    ".md": "markdown",
    # Single-file components highlight best as markup
    ".vue": "html",
    ".svelte": "html",
}


def guess_language_from_filename(path: str) -> str:
    """
    Guess the language of a source file for syntax highlighting.

    Args:
        path: File path or filename

    Returns:
        Language name for syntax highlighting, defaults to "text"
    """
    return EXTENSION_LANGUAGE_MAP.get(Path(path).suffix.lower(), "text")


def safe_project_name(name: str) -> str:
    """
    Turn a project title into a safe file name.

    Args:
        name: Free-form project title

    Returns:
        A lowercase string usable as a file or archive name
    """
    # Take first 50 characters
    name = name[:50].strip()

    # Replace whitespace with underscores
    name = re.sub(r'\s+', '_', name)

    # Remove non-alphanumeric characters except underscores and hyphens
    name = re.sub(r'[^\w\-]', '', name)

    name = name.strip('_')

    if not name:
        name = "preview_project"

    return name.lower()
