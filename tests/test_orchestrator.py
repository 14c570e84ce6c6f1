"""Tests for the pipeline orchestrator and its state graph."""

from __future__ import annotations

import dukpy
import pytest

from previewkit.orchestrator import compile_project, compile_request, run_pipeline
from previewkit.schemas import (
    CompileFailure,
    CompileRequest,
    CompileSuccess,
    Framework,
    build_source_set,
)
from previewkit.state import DONE, FAILED


@pytest.mark.parametrize("framework", ["vanilla", "react", "vue", "svelte"])
def test_missing_index_html_fails_for_every_framework(framework, recording_compiler):
    compiler = recording_compiler()
    files = build_source_set({"script.js": "x", "App.jsx": "import a from 'b'", "style.css": ""})

    outcome = compile_project(framework, files, compiler)

    assert isinstance(outcome, CompileFailure)
    assert outcome.offending_file == "index.html"
    assert compiler.calls == []


def test_vanilla_scenario(scenario_files):
    outcome = compile_project(Framework.VANILLA, scenario_files)

    assert isinstance(outcome, CompileSuccess)
    assert "<style>body{color:red}</style>" in outcome.document
    assert "<script>console.log(1)</script>" in outcome.document
    assert '<link rel="stylesheet"' not in outcome.document
    assert "<script src=" not in outcome.document


def test_import_goes_to_out_of_process_compiler_first(react_import_files, recording_compiler, remote_success):
    compiler = recording_compiler(remote_success)

    outcome = compile_project("react", react_import_files, compiler)

    assert len(compiler.calls) == 1
    framework, files = compiler.calls[0]
    assert framework is Framework.REACT
    assert list(files) == ["index.html", "style.css", "App.jsx"]
    # Authoritative output is used as-is.
    assert outcome == remote_success


def test_simple_source_skips_out_of_process_compiler(react_simple_files, recording_compiler, remote_success):
    compiler = recording_compiler(remote_success)

    outcome = compile_project("react", react_simple_files, compiler)

    assert compiler.calls == []
    assert isinstance(outcome, CompileSuccess)
    assert outcome != remote_success


def test_fallback_matches_in_process_outcome(react_import_files, recording_compiler):
    compiler = recording_compiler(CompileFailure.of("Server compilation failed: 503 Service Unavailable"))

    with_failing_remote = compile_project("react", react_import_files, compiler)
    in_process_only = compile_project("react", react_import_files)

    assert len(compiler.calls) == 1
    assert isinstance(with_failing_remote, CompileSuccess)
    assert with_failing_remote == in_process_only


def test_fallback_survives_a_raising_compiler(react_import_files, raising_compiler):
    outcome = compile_project("react", react_import_files, raising_compiler)

    assert len(raising_compiler.calls) == 1
    assert outcome == compile_project("react", react_import_files)


def test_fallback_can_end_in_degraded_success(react_import_files, recording_compiler, monkeypatch):
    def fail(source, **kwargs):
        raise dukpy.JSRuntimeError("SyntaxError: unknown: Unexpected token")

    monkeypatch.setattr(dukpy, "jsx_compile", fail)

    outcome = compile_project("react", react_import_files, recording_compiler())

    assert isinstance(outcome, CompileSuccess)
    assert f'<script type="text/babel">{react_import_files["App.jsx"].content}</script>' in outcome.document
    assert "<style>h1{color:blue}</style>" in outcome.document


def test_fallback_state_is_recorded(react_import_files, recording_compiler):
    state = run_pipeline("react", react_import_files, recording_compiler())

    assert state["stage"] == DONE
    assert state["needs_full_compile"] is True
    assert state["fallback_used"] is True
    assert isinstance(state["remote_outcome"], CompileFailure)
    assert state["errors"] == ["unknown: Compile service unreachable"]


def test_verdict_recorded_without_compiler(react_import_files):
    state = run_pipeline("react", react_import_files)

    assert state["needs_full_compile"] is True
    assert state.get("remote_outcome") is None
    assert state["fallback_used"] is False
    assert isinstance(state["outcome"], CompileSuccess)


def test_unsupported_framework(scenario_files, recording_compiler):
    compiler = recording_compiler()
    state = run_pipeline("angular", scenario_files, compiler)

    outcome = state["outcome"]
    assert state["stage"] == FAILED
    assert isinstance(outcome, CompileFailure)
    assert outcome.message == "Unsupported framework: angular"
    assert outcome.offending_file == "unknown"
    assert compiler.calls == []


def test_missing_react_entry():
    files = build_source_set({"index.html": "<div></div>", "style.css": ""})
    outcome = compile_project("react", files)
    assert isinstance(outcome, CompileFailure)
    assert outcome.offending_file == "script.js"


def test_vue_sfc_goes_remote_then_falls_back(vue_sfc_files, recording_compiler):
    compiler = recording_compiler()

    outcome = compile_project("vue", vue_sfc_files, compiler)

    assert len(compiler.calls) == 1
    assert isinstance(outcome, CompileSuccess)
    assert "<style>body{margin:0}\nh1 { color: green; }</style>" in outcome.document
    assert 'Vue.createApp(__sfc__).mount("#app");</script>' in outcome.document
    assert "console.log('fallback')" not in outcome.document


def test_input_files_are_not_mutated(scenario_files):
    before = dict(scenario_files)
    compile_project("vanilla", scenario_files)
    assert scenario_files == before


def test_compile_request(scenario_files):
    request = CompileRequest.model_validate(
        {
            "framework": "vanilla",
            "files": {name: record.model_dump() for name, record in scenario_files.items()},
        }
    )
    assert compile_request(request) == compile_project("vanilla", scenario_files)
