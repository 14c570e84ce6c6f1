"""
Starter projects for each framework.

Every starter's index.html carries the literal stylesheet and script tags
the Document Assembler replaces, so a starter compiles as-is.
"""

from typing import Dict, List

from previewkit.schemas import FileRecord, Framework, build_source_set


FRAMEWORK_INFO = {
    Framework.VANILLA: {
        "name": "Vanilla JS",
        "description": "Plain HTML, CSS and JavaScript",
    },
    Framework.REACT: {
        "name": "React",
        "description": "Components written in JSX, rendered with React 18",
    },
    Framework.VUE: {
        "name": "Vue.js",
        "description": "Reactive components with the Vue 3 global build",
    },
    Framework.SVELTE: {
        "name": "Svelte",
        "description": "Single-file components compiled by the Svelte compiler",
    },
}


# =============================================================================
# SHARED FILES
# =============================================================================

_STYLE = """* {
    margin: 0;
    padding: 0;
    box-sizing: border-box;
}

body {
    font-family: system-ui, -apple-system, sans-serif;
    line-height: 1.6;
    color: #1f2937;
    background: #f9fafb;
}

.container {
    max-width: 720px;
    margin: 0 auto;
    padding: 3rem 1.5rem;
    text-align: center;
}

h1 {
    font-size: 2.5rem;
    margin-bottom: 1rem;
}

button {
    padding: 0.75rem 1.5rem;
    border: none;
    border-radius: 8px;
    background: #6366f1;
    color: white;
    font-size: 1rem;
    cursor: pointer;
}

button:hover {
    background: #4f46e5;
}
"""


def _page(title: str, head: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
{head}</head>
<body>
{body}</body>
</html>
"""


# =============================================================================
# STARTERS
# =============================================================================

_VANILLA = {
    "index.html": _page(
        "Vanilla JS",
        '    <link rel="stylesheet" href="style.css">\n',
        """    <main class="container">
        <h1>Hello, vanilla</h1>
        <p>Clicked <span id="count">0</span> times</p>
        <button id="counter">Click me</button>
    </main>
    <script src="script.js"></script>
""",
    ),
    "style.css": _STYLE,
    "script.js": """let count = 0;

document.getElementById('counter').addEventListener('click', () => {
    count += 1;
    document.getElementById('count').textContent = count;
    console.log('count is now', count);
});
""",
}

_REACT = {
    "index.html": _page(
        "React",
        """    <script crossorigin src="https://unpkg.com/react@18/umd/react.development.js"></script>
    <script crossorigin src="https://unpkg.com/react-dom@18/umd/react-dom.development.js"></script>
    <script src="https://unpkg.com/@babel/standalone/babel.min.js"></script>
    <link rel="stylesheet" href="style.css">
""",
        """    <div id="root"></div>
    <script type="text/babel" src="script.js"></script>
""",
    ),
    "style.css": _STYLE,
    "script.js": """const { useState } = React;

function App() {
    const [count, setCount] = useState(0);

    return (
        <main className="container">
            <h1>Hello, React</h1>
            <p>Clicked {count} times</p>
            <button onClick={() => setCount(count + 1)}>Click me</button>
        </main>
    );
}

ReactDOM.createRoot(document.getElementById('root')).render(<App />);
""",
}

_VUE = {
    "index.html": _page(
        "Vue.js",
        """    <script src="https://unpkg.com/vue@3/dist/vue.global.js"></script>
    <link rel="stylesheet" href="style.css">
""",
        """    <div id="app">
        <main class="container">
            <h1>{{ title }}</h1>
            <p>Clicked {{ count }} times</p>
            <button @click="count++">Click me</button>
        </main>
    </div>
    <script src="script.js"></script>
""",
    ),
    "style.css": _STYLE,
    "script.js": """const { createApp, ref } = Vue;

createApp({
    setup() {
        const title = ref('Hello, Vue');
        const count = ref(0);
        return { title, count };
    }
}).mount('#app');
""",
}

_SVELTE = {
    "index.html": _page(
        "Svelte",
        '    <link rel="stylesheet" href="style.css">\n',
        """    <div id="app"></div>
    <script type="module" src="main.js"></script>
""",
    ),
    "style.css": _STYLE,
    "App.svelte": """<script>
    let count = 0;

    function increment() {
        count += 1;
    }
</script>

<main class="container">
    <h1>Hello, Svelte</h1>
    <p>Clicked {count} times</p>
    <button on:click={increment}>Click me</button>
</main>

<style>
    h1 {
        color: #ff3e00;
    }
</style>
""",
    # Used as-is when App.svelte cannot go through the Svelte compiler.
    "main.js": """const target = document.getElementById('app');
let count = 0;

target.innerHTML = `
    <main class="container">
        <h1>Hello, Svelte</h1>
        <p>Clicked <span id="count">0</span> times</p>
        <button id="counter">Click me</button>
    </main>
`;

document.getElementById('counter').addEventListener('click', () => {
    count += 1;
    document.getElementById('count').textContent = count;
});
""",
}

_STARTERS = {
    Framework.VANILLA: _VANILLA,
    Framework.REACT: _REACT,
    Framework.VUE: _VUE,
    Framework.SVELTE: _SVELTE,
}


def starter_files(framework) -> Dict[str, FileRecord]:
    """
    Get the starter source set for a framework.

    Args:
        framework: Framework or framework identifier

    Returns:
        A fresh source set; callers may edit it freely

    Raises:
        UnsupportedFrameworkError: If the framework is unknown
    """
    return build_source_set(_STARTERS[Framework.parse(framework)])


def list_frameworks() -> List[Dict[str, str]]:
    """Get display metadata for every supported framework."""
    return [
        {"id": framework.value, **info}
        for framework, info in FRAMEWORK_INFO.items()
    ]
