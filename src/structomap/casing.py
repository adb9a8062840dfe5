"""Key casing: snake_case, camelCase and PascalCase key converters.

camelCase and PascalCase both go through snake_case first, so the word
boundaries are the same for all three conventions:

    FirstName  -> first_name  / firstName  / FirstName
    ID         -> id          / id         / Id
    HTTPServer -> http_server / httpServer / HttpServer
    _id        -> _id         / _id        / _Id
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

KeyConverter = Callable[[str], str]

# "HTTPServer" -> "HTTP_Server"
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
# "firstName" -> "first_Name", "line2Text" -> "line2_Text"
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-.]+")
_REPEATED_UNDERSCORE = re.compile(r"_{2,}")


class KeyCase(str, Enum):
    """Naming convention applied to every key of a projected mapping."""

    NOT_SET = "none"
    CAMEL = "camel"
    PASCAL = "pascal"
    SNAKE = "snake"

    @classmethod
    def parse(cls, value: str | KeyCase) -> KeyCase:
        """Parse a case name, e.g. from a config file or env var.

        Accepts the enum values plus the conventional spellings
        ("snake_case", "camelCase", "PascalCase"), case-insensitively.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "").replace("-", "")
        normalized = normalized.removesuffix("case") or normalized
        aliases = {
            "": cls.NOT_SET,
            "none": cls.NOT_SET,
            "notset": cls.NOT_SET,
            "camel": cls.CAMEL,
            "pascal": cls.PASCAL,
            "snake": cls.SNAKE,
        }
        if normalized not in aliases:
            raise ValueError(
                f"Unknown key case: {value!r}. Available: {[c.value for c in cls]}"
            )
        return aliases[normalized]


def _split(key: str) -> tuple[str, list[str]]:
    """Leading-underscore prefix and words of the snake_case form."""
    snake = to_snake_case(key)
    body = snake.lstrip("_")
    return snake[: len(snake) - len(body)], [w for w in body.split("_") if w]


def to_snake_case(key: str) -> str:
    """Convert a key to snake_case: FirstName -> first_name."""
    s = _SEPARATORS.sub("_", key)
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", s)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    s = _REPEATED_UNDERSCORE.sub("_", s)
    return s.lower()


def to_camel_case(key: str) -> str:
    """Convert a key to camelCase: FirstName -> firstName, ID -> id."""
    prefix, words = _split(key)
    if not words:
        return to_snake_case(key)
    return prefix + words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])


def to_pascal_case(key: str) -> str:
    """Convert a key to PascalCase: first_name -> FirstName, ID -> Id."""
    prefix, words = _split(key)
    if not words:
        return to_snake_case(key)
    return prefix + "".join(w[:1].upper() + w[1:] for w in words)


_CONVERTERS: dict[KeyCase, KeyConverter] = {
    KeyCase.CAMEL: to_camel_case,
    KeyCase.PASCAL: to_pascal_case,
    KeyCase.SNAKE: to_snake_case,
}


def key_converter(case: KeyCase | str) -> KeyConverter | None:
    """Return the converter for a case, or None for KeyCase.NOT_SET."""
    return _CONVERTERS.get(KeyCase.parse(case))
