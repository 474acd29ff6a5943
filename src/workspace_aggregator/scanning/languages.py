"""Language classification: the single source of truth for extension labels.

Adding a new language:
  1. Add its extensions to LANGUAGE_EXTENSIONS below.
  2. That's it. LanguageClassifier picks it up automatically.
"""

from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping

OTHER = "Other"

LANGUAGE_EXTENSIONS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "Rust": ("rs",),
        "Python": ("py", "pyi", "pyw"),
        "JavaScript": ("js", "mjs", "cjs", "jsx"),
        "TypeScript": ("ts", "tsx", "mts", "cts"),
        "Java": ("java",),
        "Kotlin": ("kt", "kts"),
        "Scala": ("scala",),
        "Go": ("go",),
        "C": ("c", "h"),
        "C++": ("cpp", "cc", "cxx", "hpp", "hh", "hxx"),
        "C#": ("cs",),
        "Ruby": ("rb",),
        "PHP": ("php",),
        "Swift": ("swift",),
        "Shell": ("sh", "bash", "zsh", "fish"),
        "SQL": ("sql",),
        "HTML": ("html", "htm"),
        "CSS": ("css", "scss", "sass", "less"),
        "Vue": ("vue",),
        "Svelte": ("svelte",),
        "Markdown": ("md", "markdown"),
        "reStructuredText": ("rst",),
        "JSON": ("json",),
        "YAML": ("yaml", "yml"),
        "TOML": ("toml",),
        "XML": ("xml",),
        "INI": ("ini", "cfg", "conf"),
        "Text": ("txt",),
        "Lua": ("lua",),
        "Dart": ("dart",),
        "Elixir": ("ex", "exs"),
        "Haskell": ("hs",),
        "R": ("r",),
        "Dockerfile": ("dockerfile",),
        "Terraform": ("tf", "tfvars"),
        "Protobuf": ("proto",),
        "GraphQL": ("graphql", "gql"),
    }
)

_EXTENSION_TO_LANGUAGE: Mapping[str, str] = MappingProxyType(
    {ext: language for language, exts in LANGUAGE_EXTENSIONS.items() for ext in exts}
)


def extension_of(path: str) -> str:
    """Final extension of a path, lower-case and without the dot ("" if none)."""
    return PurePosixPath(path).suffix.lstrip(".").lower()


class LanguageClassifier:
    """Maps a file extension to a language label.

    Pure and stateless; one shared instance is safe across threads.
    """

    def classify(self, extension: str) -> str:
        if not extension:
            return OTHER
        return _EXTENSION_TO_LANGUAGE.get(extension.lstrip(".").lower(), OTHER)

    def classify_path(self, path: str) -> str:
        name = PurePosixPath(path).name
        if name.lower() == "dockerfile":
            return "Dockerfile"
        return self.classify(extension_of(path))

    @staticmethod
    def known_extensions() -> frozenset[str]:
        return frozenset(_EXTENSION_TO_LANGUAGE)
