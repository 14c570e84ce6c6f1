"""
Pydantic schemas for source files, compile requests and compile outcomes.
"""

from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from previewkit.errors import UnsupportedFrameworkError


class Framework(str, Enum):
    """Frameworks the preview pipeline knows how to build."""
    VANILLA = "vanilla"
    REACT = "react"
    VUE = "vue"
    SVELTE = "svelte"

    @classmethod
    def parse(cls, value: Any) -> "Framework":
        """Return the Framework for an identifier, or raise UnsupportedFrameworkError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFrameworkError(value) from None


class FileKind(str, Enum):
    """Declared kind of a source file."""
    MARKUP = "markup"
    STYLE = "style"
    SCRIPT = "script"
    JSX = "jsx"
    VUE = "vue"
    SVELTE = "svelte"


SUFFIX_KINDS = {
    ".html": FileKind.MARKUP,
    ".htm": FileKind.MARKUP,
    ".css": FileKind.STYLE,
    ".jsx": FileKind.JSX,
    ".tsx": FileKind.JSX,
    ".vue": FileKind.VUE,
    ".svelte": FileKind.SVELTE,
}


def kind_for_filename(name: str) -> FileKind:
    """Infer the file kind from its suffix. Unknown suffixes are scripts."""
    return SUFFIX_KINDS.get(PurePosixPath(name).suffix.lower(), FileKind.SCRIPT)


class FileRecord(BaseModel):
    """A single source file. Immutable; edits produce a new record."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="File name, unique within a source set")
    content: str = Field("", description="File content")
    kind: FileKind = Field(..., description="Declared kind of the file")

    @model_validator(mode="before")
    @classmethod
    def _infer_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("kind") and data.get("name"):
            data = {**data, "kind": kind_for_filename(data["name"])}
        return data

    def with_content(self, content: str) -> "FileRecord":
        """Return a copy of this record holding new content."""
        return self.model_copy(update={"content": content})


SourceSet = Mapping[str, FileRecord]


def build_source_set(files: Mapping[str, str]) -> Dict[str, FileRecord]:
    """
    Build a source set from plain file contents.

    Args:
        files: Mapping of file name to file content

    Returns:
        Mapping of file name to FileRecord, in the same order
    """
    return {name: FileRecord(name=name, content=content) for name, content in files.items()}


class CompileRequest(BaseModel):
    """Request body accepted by the compile endpoint and the in-process call."""
    framework: str = Field(..., description="Framework identifier")
    files: Dict[str, FileRecord] = Field(..., description="Map of file name to file record")
    mode: Literal["development", "production"] = Field("development", description="Build mode")

    @model_validator(mode="before")
    @classmethod
    def _normalize_files(cls, data: Any) -> Any:
        # Accept bare strings and records that leave out their own name.
        if not isinstance(data, dict) or not isinstance(data.get("files"), dict):
            return data
        files = {}
        for name, value in data["files"].items():
            if isinstance(value, str):
                value = {"name": name, "content": value}
            elif isinstance(value, dict) and not value.get("name"):
                value = {**value, "name": name}
            files[name] = value
        return {**data, "files": files}


class CompileErrorDetail(BaseModel):
    """Error payload of a failed compile."""
    message: str = Field(..., description="Human-readable failure reason")
    file: str = Field("unknown", description="File the failure is about")


class CompileSuccess(BaseModel):
    """Successful compile: one self-contained HTML document."""
    success: Literal[True] = True
    html: str = Field(..., description="Previewable document")

    @property
    def document(self) -> str:
        return self.html


class CompileFailure(BaseModel):
    """Failed compile."""
    success: Literal[False] = False
    error: CompileErrorDetail

    @classmethod
    def of(cls, message: str, file: str = "unknown") -> "CompileFailure":
        return cls(error=CompileErrorDetail(message=message, file=file))

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def offending_file(self) -> str:
        return self.error.file


CompileOutcome = Union[CompileSuccess, CompileFailure]

compile_outcome_adapter: TypeAdapter = TypeAdapter(CompileOutcome)


class ToolchainOutput(BaseModel):
    """What the containerised build script prints on stdout."""
    script: str = Field("", description="Bundled JavaScript")
    style: str = Field("", description="Bundled CSS")
    error: Optional[CompileErrorDetail] = Field(None, description="Set when the build failed")
