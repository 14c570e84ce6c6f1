"""Shared fixtures: source sets and fake out-of-process compilers."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import pytest

from previewkit.config import reset_config
from previewkit.schemas import (
    CompileFailure,
    CompileOutcome,
    CompileSuccess,
    Framework,
    SourceSet,
    build_source_set,
)

SCENARIO_MARKUP = (
    '<html><head><link rel="stylesheet" href="style.css"></head>'
    '<body><script src="script.js"></script></body></html>'
)


class RecordingCompiler:
    """Out-of-process compiler double that returns a fixed outcome."""

    def __init__(self, outcome: CompileOutcome) -> None:
        self.outcome = outcome
        self.calls: List[Tuple[Framework, dict]] = []

    def compile(self, framework: Framework, files: SourceSet) -> CompileOutcome:
        self.calls.append((framework, dict(files)))
        return self.outcome


class RaisingCompiler(RecordingCompiler):
    """Compiler double that breaks its contract and raises."""

    def __init__(self) -> None:
        super().__init__(CompileFailure.of("unused"))

    def compile(self, framework: Framework, files: SourceSet) -> CompileOutcome:
        super().compile(framework, files)
        raise RuntimeError("connection reset")


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def scenario_files() -> dict:
    return build_source_set(
        {
            "index.html": SCENARIO_MARKUP,
            "style.css": "body{color:red}",
            "script.js": "console.log(1)",
        }
    )


@pytest.fixture
def react_import_files() -> dict:
    return build_source_set(
        {
            "index.html": (
                '<link rel="stylesheet" href="style.css"><div id="root"></div>'
                '<script type="text/babel" src="App.jsx"></script>'
            ),
            "style.css": "h1{color:blue}",
            "App.jsx": (
                "import { useState } from 'react';\n"
                "const App = () => <h1>Hello</h1>;\n"
                "ReactDOM.render(<App />, document.getElementById('root'));\n"
            ),
        }
    )


@pytest.fixture
def react_simple_files() -> dict:
    return build_source_set(
        {
            "index.html": '<div id="root"></div><script type="text/babel" src="App.jsx"></script>',
            "App.jsx": "ReactDOM.render(<h1>Hi</h1>, document.getElementById('root'));\n",
        }
    )


@pytest.fixture
def vue_sfc_files() -> dict:
    return build_source_set(
        {
            "index.html": (
                '<link rel="stylesheet" href="style.css"><div id="app"></div>'
                '<script src="main.js"></script>'
            ),
            "style.css": "body{margin:0}",
            "App.vue": (
                "<template>\n  <h1>{{ msg }}</h1>\n</template>\n"
                "<script>\nexport default { data() { return { msg: 'hi' } } }\n</script>\n"
                "<style>\nh1 { color: green; }\n</style>\n"
            ),
            "main.js": "console.log('fallback');",
        }
    )


@pytest.fixture
def remote_success() -> CompileSuccess:
    return CompileSuccess(html="<html><body>from the compile service</body></html>")


@pytest.fixture
def recording_compiler() -> Callable[[Optional[CompileOutcome]], RecordingCompiler]:
    """Factory for a compiler returning the given outcome (a failure by default)."""

    def factory(outcome: Optional[CompileOutcome] = None) -> RecordingCompiler:
        return RecordingCompiler(outcome or CompileFailure.of("Compile service unreachable"))

    return factory


@pytest.fixture
def raising_compiler() -> RaisingCompiler:
    return RaisingCompiler()

