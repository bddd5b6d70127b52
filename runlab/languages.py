"""Editor language tags mapped to the Piston runtime that executes them."""

LANGUAGE_CONFIG = {
    "javascript": {"label": "JavaScript", "piston_runtime": {"language": "javascript", "version": "18.15.0"}},
    "typescript": {"label": "TypeScript", "piston_runtime": {"language": "typescript", "version": "5.0.3"}},
    "python": {"label": "Python", "piston_runtime": {"language": "python", "version": "3.10.0"}},
    "java": {"label": "Java", "piston_runtime": {"language": "java", "version": "15.0.2"}},
    "go": {"label": "Go", "piston_runtime": {"language": "go", "version": "1.16.2"}},
    "rust": {"label": "Rust", "piston_runtime": {"language": "rust", "version": "1.68.2"}},
    "cpp": {"label": "C++", "piston_runtime": {"language": "cpp", "version": "10.2.0"}},
    "csharp": {"label": "C#", "piston_runtime": {"language": "csharp", "version": "6.12.0"}},
    "ruby": {"label": "Ruby", "piston_runtime": {"language": "ruby", "version": "3.0.1"}},
    "swift": {"label": "Swift", "piston_runtime": {"language": "swift", "version": "5.3.3"}},
}

SUPPORTED_LANGUAGES = list(LANGUAGE_CONFIG)


def get_runtime(language):
    """Return the ``(runtime, version)`` pair for a language tag, or None."""
    entry = LANGUAGE_CONFIG.get(language)
    if entry is None:
        return None
    runtime = entry["piston_runtime"]
    return runtime["language"], runtime["version"]
