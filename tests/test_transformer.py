"""Tests for the in-process transformer."""

from __future__ import annotations

import dukpy
import pytest

from previewkit.errors import TransformError
from previewkit.pipeline.resolver import resolve
from previewkit.pipeline.transformer import (
    BABEL_RUNTIME_TYPE,
    compile_jsx,
    extract_sfc_blocks,
    sfc_to_script,
    transform,
)
from previewkit.schemas import Framework, build_source_set


@pytest.fixture
def broken_babel(monkeypatch):
    def fail(source, **kwargs):
        raise dukpy.JSRuntimeError("SyntaxError: unknown: Unexpected token (1:5)")

    monkeypatch.setattr(dukpy, "jsx_compile", fail)


def test_compile_jsx_produces_plain_javascript():
    code = compile_jsx('const el = <div className="a">hi</div>;')
    assert "React.createElement" in code
    assert "<div" not in code


def test_compile_jsx_wraps_babel_errors(broken_babel):
    with pytest.raises(TransformError) as exc:
        compile_jsx("const el = <div", filename="App.jsx")
    assert exc.value.file == "App.jsx"


def test_react_transform_compiles_entry(react_simple_files):
    selection = resolve(Framework.REACT, react_simple_files)
    result = transform(Framework.REACT, selection)
    assert "React.createElement" in result.script
    assert result.script_type is None
    assert not result.degraded


def test_react_transform_degrades_to_runtime_babel(react_simple_files, broken_babel):
    selection = resolve(Framework.REACT, react_simple_files)
    result = transform(Framework.REACT, selection)
    assert result.degraded
    assert result.script_type == BABEL_RUNTIME_TYPE
    assert result.script == react_simple_files["App.jsx"].content


def test_extract_sfc_blocks():
    source = (
        "<template>\n  <div>\n    <template v-if=\"ok\"><b>yes</b></template>\n  </div>\n</template>\n"
        "<script>\nexport default { name: 'App' }\n</script>\n"
        "<style>\nb { color: red; }\n</style>\n"
    )
    blocks = extract_sfc_blocks(source)
    assert blocks.template == '<div>\n    <template v-if="ok"><b>yes</b></template>\n  </div>'
    assert blocks.script == "export default { name: 'App' }"
    assert blocks.style == "b { color: red; }"


def test_extract_sfc_blocks_missing_blocks_are_empty():
    blocks = extract_sfc_blocks("<template><p>only markup</p></template>")
    assert blocks.template == "<p>only markup</p>"
    assert blocks.script == ""
    assert blocks.style == ""


def test_sfc_to_script_rewrites_default_export():
    script = sfc_to_script(
        "<template><p>{{ msg }}</p></template>\n"
        "<script>export default { data() { return { msg: 'hi' } } }</script>"
    )
    assert script.startswith("const __sfc__ = { data()")
    assert "export default" not in script
    assert '__sfc__.template = "<p>{{ msg }}<\\/p>";' in script
    assert script.endswith('Vue.createApp(__sfc__).mount("#app");')


def test_sfc_to_script_without_script_block():
    script = sfc_to_script("<template><p>static</p></template>")
    assert script.splitlines()[0] == "const __sfc__ = {};"


def test_vue_component_merges_styles(vue_sfc_files):
    selection = resolve(Framework.VUE, vue_sfc_files)
    result = transform(Framework.VUE, selection)
    assert result.style == "body{margin:0}\nh1 { color: green; }"
    assert "Vue.createApp(__sfc__)" in result.script


def test_vue_plain_script_is_verbatim():
    files = build_source_set({"index.html": "", "main.js": "Vue.createApp({}).mount('#app')"})
    result = transform(Framework.VUE, resolve(Framework.VUE, files))
    assert result.script == "Vue.createApp({}).mount('#app')"
    assert result.style is None


def test_svelte_component_uses_companion():
    files = build_source_set({"index.html": "", "App.svelte": "<h1>x</h1>", "main.js": "render()"})
    result = transform(Framework.SVELTE, resolve(Framework.SVELTE, files))
    assert result.script == "render()"


def test_svelte_component_alone_is_verbatim():
    files = build_source_set({"index.html": "", "App.svelte": "<h1>x</h1>"})
    result = transform(Framework.SVELTE, resolve(Framework.SVELTE, files))
    assert result.script == "<h1>x</h1>"


def test_vanilla_without_script(scenario_files):
    files = {name: rec for name, rec in scenario_files.items() if name != "script.js"}
    result = transform(Framework.VANILLA, resolve(Framework.VANILLA, files))
    assert result.script is None
    assert result.style == "body{color:red}"
