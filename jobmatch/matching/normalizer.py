"""Skill name normalization for matching."""

from __future__ import annotations

import re
from collections.abc import Iterable

# Variations -> canonical skill name. Every canonical value is itself clean
# (lowercase, no surrounding punctuation, no ".js" dot) and, when it also
# appears as a key, maps to itself, which keeps normalize_skill idempotent.
SKILL_SYNONYMS: dict[str, str] = {
    # JavaScript / TypeScript
    "js": "javascript",
    "javascript": "javascript",
    "ecmascript": "javascript",
    "es6": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    # Node.js
    "node": "nodejs",
    "nodejs": "nodejs",
    "node js": "nodejs",
    # Frontend frameworks
    "react": "react",
    "reactjs": "react",
    "react js": "react",
    "nextjs": "nextjs",
    "next js": "nextjs",
    "vue": "vue",
    "vuejs": "vue",
    "angularjs": "angular",
    "angular": "angular",
    # Python
    "py": "python",
    "python3": "python",
    "python": "python",
    # Java
    "java": "java",
    "java se": "java",
    "java ee": "java",
    "j2ee": "java",
    # Go
    "golang": "go",
    "go": "go",
    # .NET / C#
    "csharp": "c#",
    "c sharp": "c#",
    "dotnet": ".net",
    ".net": ".net",
    # Databases
    "postgres": "postgresql",
    "postgresql": "postgresql",
    "pg": "postgresql",
    "mysql": "mysql",
    "mongo": "mongodb",
    "mongo db": "mongodb",
    "mongodb": "mongodb",
    "nosql": "mongodb",
    # Styling / markup
    "css": "css",
    "css3": "css",
    "scss": "sass",
    "sass": "sass",
    "less": "less",
    "html": "html",
    "html5": "html",
    # Tooling
    "git": "git",
    "github": "git",
    "gitlab": "git",
    "docker": "docker",
    "dockerfile": "docker",
    "k8s": "kubernetes",
    "kubernetes": "kubernetes",
    # Cloud
    "aws": "aws",
    "amazon web services": "aws",
    "amazon aws": "aws",
    "gcp": "google cloud",
    "google cloud platform": "google cloud",
    "google cloud": "google cloud",
    # APIs
    "rest": "rest api",
    "restful": "rest api",
    "rest api": "rest api",
    "restful api": "rest api",
    "api": "rest api",
    "graphql": "graphql",
    "gql": "graphql",
    # Machine learning
    "ml": "machine learning",
    "machine learning": "machine learning",
}

# Characters trimmed from both ends of a skill name. "+" and "#" are kept
# ("C++", "C#"); a leading "." is kept for ".net" by the synonym lookup.
_EDGE_PUNCTUATION = " \t.,;:!?/\\|-_()[]{}'\"`*"
_WHITESPACE = re.compile(r"\s+")
_JS_SUFFIX_DOT = re.compile(r"\.+(?=js\b)")


def _clean(name: str) -> str:
    value = _WHITESPACE.sub(" ", name.strip().lower())
    if value in SKILL_SYNONYMS:
        return value
    value = value.strip(_EDGE_PUNCTUATION)
    value = _JS_SUFFIX_DOT.sub("", value)
    return _WHITESPACE.sub(" ", value)


def normalize_skill(name: str | None) -> str:
    """Normalize a skill name to its canonical comparison form.

    Lowercases, trims, collapses internal whitespace, strips surrounding
    punctuation, drops the dot in ``.js`` suffixes ("React.js" -> "reactjs")
    and maps known abbreviations and variants through ``SKILL_SYNONYMS``
    ("JS" -> "javascript", "k8s" -> "kubernetes").

    Empty or whitespace-only input normalizes to ``""``.
    """
    if not name:
        return ""
    cleaned = _clean(str(name))
    return SKILL_SYNONYMS.get(cleaned, cleaned)


def skills_match(skill1: str, skill2: str) -> bool:
    """Return True if two skill names refer to the same skill."""
    canonical1 = normalize_skill(skill1)
    if not canonical1:
        return False
    return canonical1 == normalize_skill(skill2)


def normalize_skills(names: Iterable[str]) -> list[str]:
    """Normalize a list of skill names, dropping empties and duplicates."""
    return list(skill_index(names))


def skill_index(names: Iterable[str]) -> dict[str, str]:
    """Map each normalized skill to the first original spelling seen.

    Insertion order follows the input, so iteration is deterministic.
    """
    index: dict[str, str] = {}
    for name in names:
        canonical = normalize_skill(name)
        if canonical and canonical not in index:
            index[canonical] = name.strip()
    return index
