"""Languages the declaration extractor has a classifier for."""

from pathlib import Path

_LANGUAGE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "go": (".go",),
    "java": (".java",),
    "javascript": (".js", ".jsx", ".mjs", ".cjs"),
    "python": (".py", ".pyi"),
    "tsx": (".tsx",),
    "typescript": (".ts", ".mts", ".cts"),
}

_LANGUAGE_ALIASES = {
    "golang": "go",
    "js": "javascript",
    "jsx": "javascript",
    "py": "python",
    "ts": "typescript",
}

_EXTENSION_LANGUAGE_MAP = {
    extension: language for language, extensions in _LANGUAGE_EXTENSIONS.items() for extension in extensions
}

SUPPORTED_LANGUAGES = frozenset(_LANGUAGE_EXTENSIONS)
SUPPORTED_EXTENSIONS = frozenset(_EXTENSION_LANGUAGE_MAP)


def normalize_language(language: str) -> str:
    name = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(name, name)
    if resolved not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    try:
        return _EXTENSION_LANGUAGE_MAP[file_path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Unsupported file extension: {file_path.suffix}") from None


def resolve_language(language: str | None, file_path: Path | None) -> str:
    """Prefer an explicit language name; fall back to the file extension."""
    if language:
        return normalize_language(language)
    if file_path is not None:
        return detect_language_from_path(file_path)
    raise ValueError("Language must be provided when no file path is available.")


def is_supported_file(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS
