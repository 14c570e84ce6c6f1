"""Tests for the starter projects."""

from __future__ import annotations

import pytest

from previewkit.errors import UnsupportedFrameworkError
from previewkit.orchestrator import compile_project
from previewkit.pipeline.classifier import needs_full_compile
from previewkit.schemas import CompileSuccess, Framework
from previewkit.templates import list_frameworks, starter_files
from previewkit.utils import validate_files


@pytest.mark.parametrize("framework", list(Framework))
def test_starters_compile_in_process(framework):
    outcome = compile_project(framework, starter_files(framework))

    assert isinstance(outcome, CompileSuccess)
    assert '<link rel="stylesheet"' not in outcome.document
    assert "<style>" in outcome.document
    assert ' src="script.js"' not in outcome.document
    assert ' src="main.js"' not in outcome.document


@pytest.mark.parametrize("framework", list(Framework))
def test_starters_validate_cleanly(framework):
    assert validate_files(framework, starter_files(framework)) == []


def test_svelte_starter_prefers_full_compile():
    files = starter_files("svelte")
    assert needs_full_compile(files["App.svelte"].content, Framework.SVELTE)


def test_starter_files_are_fresh():
    first = starter_files("vanilla")
    first["extra.js"] = None
    assert "extra.js" not in starter_files("vanilla")


def test_unknown_framework():
    with pytest.raises(UnsupportedFrameworkError):
        starter_files("angular")


def test_list_frameworks():
    frameworks = list_frameworks()
    assert [f["id"] for f in frameworks] == ["vanilla", "react", "vue", "svelte"]
    assert all(f["name"] and f["description"] for f in frameworks)
