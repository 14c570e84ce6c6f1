"""Tests for the complexity classifier."""

from __future__ import annotations

import pytest

from previewkit.pipeline.classifier import MAX_SIMPLE_LINES, needs_full_compile
from previewkit.schemas import Framework


@pytest.mark.parametrize(
    "source",
    [
        "import React from 'react';\nconst a = <div/>;",
        "import { useState } from 'react';",
        "import './style.css';",
        "  import * as lib from 'lib';",
        "interface Props { name: string }",
        "type Props = { name: string };",
        "type Pair<T> = [T, T];",
        "function App(): JSX.Element { return <div/>; }",
        "const f = (a): number => a;",
    ],
)
def test_react_complex_sources(source):
    assert needs_full_compile(source, Framework.REACT)


@pytest.mark.parametrize(
    "source",
    [
        "ReactDOM.render(<h1>Hi</h1>, root);",
        "const important = true;",
        "// we import nothing here\nconst a = 1;",
        "const x = cond ? a : b;",
    ],
)
def test_react_simple_sources(source):
    assert not needs_full_compile(source, Framework.REACT)


def test_react_line_threshold():
    at_limit = "\n".join(["const a = 1;"] * MAX_SIMPLE_LINES)
    over_limit = "\n".join(["const a = 1;"] * (MAX_SIMPLE_LINES + 1))
    assert not needs_full_compile(at_limit, Framework.REACT)
    assert needs_full_compile(over_limit, Framework.REACT)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("<template><div/></template>", True),
        ("<template\n  lang=\"html\"><div/></template>", True),
        ("<style scoped>h1{}</style>", True),
        ("<style>h1{}</style>", False),
        ("Vue.createApp({}).mount('#app');", False),
    ],
)
def test_vue(source, expected):
    assert needs_full_compile(source, Framework.VUE) is expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("<script>let a = 1;</script>\n<style>h1{}</style>", True),
        ("<script>let a = 1;</script>\n<h1>{a}</h1>", False),
        ("<style>h1{}</style>", False),
    ],
)
def test_svelte(source, expected):
    assert needs_full_compile(source, Framework.SVELTE) is expected


def test_vanilla_never_needs_full_compile():
    assert not needs_full_compile("import x from 'y';\n" * 200, Framework.VANILLA)
