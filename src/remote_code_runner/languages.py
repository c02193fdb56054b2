from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .execution.errors import UnknownLanguageError


@dataclass(frozen=True, slots=True)
class Language:
    """One execution environment offered by the remote service.

    Example:
        ```python
        lang = Language(key="python", id=71, name="Python (3.8.1)", extensions=(".py",))
        ```
    """

    key: str
    id: int
    name: str
    extensions: tuple[str, ...] = ()


# Judge0 CE language ids.
LANGUAGES: tuple[Language, ...] = (
    Language("assembly", 45, "Assembly (NASM 2.14.02)", (".asm",)),
    Language("bash", 46, "Bash (5.0.0)", (".sh",)),
    Language("c", 50, "C (GCC 9.2.0)", (".c",)),
    Language("cpp", 54, "C++ (GCC 9.2.0)", (".cpp", ".cc", ".cxx")),
    Language("csharp", 51, "C# (Mono 6.6.0.161)", (".cs",)),
    Language("go", 60, "Go (1.13.5)", (".go",)),
    Language("haskell", 61, "Haskell (GHC 8.8.1)", (".hs",)),
    Language("java", 62, "Java (OpenJDK 13.0.1)", (".java",)),
    Language("javascript", 63, "JavaScript (Node.js 12.14.0)", (".js", ".mjs")),
    Language("kotlin", 78, "Kotlin (1.3.70)", (".kt",)),
    Language("lua", 64, "Lua (5.3.5)", (".lua",)),
    Language("perl", 85, "Perl (5.28.1)", (".pl",)),
    Language("php", 68, "PHP (7.4.1)", (".php",)),
    Language("python", 71, "Python (3.8.1)", (".py",)),
    Language("r", 80, "R (4.0.0)", (".r", ".R")),
    Language("ruby", 72, "Ruby (2.7.0)", (".rb",)),
    Language("rust", 73, "Rust (1.40.0)", (".rs",)),
    Language("scala", 81, "Scala (2.13.2)", (".scala",)),
    Language("sql", 82, "SQL (SQLite 3.27.2)", (".sql",)),
    Language("swift", 83, "Swift (5.2.3)", (".swift",)),
    Language("typescript", 74, "TypeScript (3.7.4)", (".ts",)),
)
DEFAULT_LANGUAGE_KEY = "cpp"

_BY_KEY = {lang.key: lang for lang in LANGUAGES}
_BY_ID = {lang.id: lang for lang in LANGUAGES}
_BY_EXTENSION = {ext: lang for lang in LANGUAGES for ext in lang.extensions}


def get_language(language: str | int | Language) -> Language:
    """Resolve a language key, numeric id or Language to a table entry.

    Example:
        ```python
        lang = get_language("python")
        same = get_language(71)
        ```
    """
    if isinstance(language, Language):
        return language
    if isinstance(language, int) and not isinstance(language, bool):
        found = _BY_ID.get(language)
    elif isinstance(language, str):
        cleaned = language.strip().lower()
        found = _BY_KEY.get(cleaned)
        if found is None and cleaned.isdigit():
            found = _BY_ID.get(int(cleaned))
    else:
        found = None
    if found is None:
        raise UnknownLanguageError(language)
    return found


def language_for_path(path: str | Path) -> Language:
    """Infer the language from a source file's extension.

    Example:
        ```python
        lang = language_for_path("solution.cpp")
        ```
    """
    suffix = Path(path).suffix
    found = _BY_EXTENSION.get(suffix) or _BY_EXTENSION.get(suffix.lower())
    if found is None:
        raise UnknownLanguageError(suffix or str(path))
    return found
