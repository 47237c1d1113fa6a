"""Ivy artifact pattern parsing and substitution.

Patterns are literal text interleaved with ``[variable]`` placeholders and
``(optional)`` sections, e.g.
``https://repo.example.com/[organisation]/[module]/[revision]/[type]s/[artifact](-[classifier]).[ext]``.
An optional section is rendered only when every variable inside it is set.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple, Union

from ..constants import Constants
from ..errors import PatternParseError, ResolutionError

DEFAULT_PATTERN_TOKEN = "[defaultPattern]"


@dataclass(frozen=True)
class Const:
    text: str


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Opt:
    chunks: Tuple["Chunk", ...]


Chunk = Union[Const, Var, Opt]


def _parse_chunks(text: str) -> Tuple[Chunk, ...]:
    # Stack of chunk lists; one per open optional section.
    stack: List[List[Chunk]] = [[]]
    literal: List[str] = []
    i = 0

    def flush() -> None:
        if literal:
            stack[-1].append(Const("".join(literal)))
            literal.clear()

    while i < len(text):
        char = text[i]
        if char == "[":
            end = text.find("]", i + 1)
            if end == -1:
                raise PatternParseError(f"unclosed '[' at position {i}")
            name = text[i + 1:end]
            if not name:
                raise PatternParseError(f"empty variable name at position {i}")
            if "[" in name or "(" in name or ")" in name:
                raise PatternParseError(f"unexpected character in variable at position {i}")
            flush()
            stack[-1].append(Var(name))
            i = end + 1
            continue
        if char == "]":
            raise PatternParseError(f"unexpected ']' at position {i}")
        if char == "(":
            flush()
            stack.append([])
        elif char == ")":
            if len(stack) == 1:
                raise PatternParseError(f"unexpected ')' at position {i}")
            flush()
            chunks = stack.pop()
            stack[-1].append(Opt(tuple(chunks)))
        else:
            literal.append(char)
        i += 1

    if len(stack) > 1:
        raise PatternParseError("unclosed '('")
    flush()
    return tuple(stack[0])


def _render(chunks: Tuple[Chunk, ...], variables: Mapping[str, str]) -> Optional[str]:
    """Render chunks; None when a variable is missing."""
    parts: List[str] = []
    for chunk in chunks:
        if isinstance(chunk, Const):
            parts.append(chunk.text)
        elif isinstance(chunk, Var):
            value = variables.get(chunk.name)
            if not value:
                return None
            parts.append(value)
        else:
            rendered = _render(chunk.chunks, variables)
            if rendered is not None:
                parts.append(rendered)
    return "".join(parts)


@dataclass(frozen=True)
class IvyPattern:
    """A parsed Ivy pattern."""
    source: str
    chunks: Tuple[Chunk, ...]

    @classmethod
    def parse(cls, pattern: str) -> "IvyPattern":
        """Parse ``pattern``, expanding ``[defaultPattern]``.

        Raises:
            PatternParseError: if the pattern is empty or malformed.
        """
        if not pattern or not pattern.strip():
            raise PatternParseError("empty pattern")
        expanded = pattern.replace(DEFAULT_PATTERN_TOKEN, Constants.IVY_DEFAULT_PATTERN)
        return cls(source=pattern, chunks=_parse_chunks(expanded))

    @property
    def variables(self) -> Tuple[str, ...]:
        names: List[str] = []

        def collect(chunks: Tuple[Chunk, ...]) -> None:
            for chunk in chunks:
                if isinstance(chunk, Var):
                    names.append(chunk.name)
                elif isinstance(chunk, Opt):
                    collect(chunk.chunks)

        collect(self.chunks)
        return tuple(names)

    def substitute(self, variables: Mapping[str, str]) -> str:
        """Render the pattern.

        Raises:
            ResolutionError: if a required variable is not provided.
        """
        rendered = _render(self.chunks, variables)
        if rendered is None:
            missing = [c.name for c in self.chunks if isinstance(c, Var) and not variables.get(c.name)]
            raise ResolutionError(f"pattern {self.source!r} needs variables {missing}")
        return rendered

    def revision_prefix(self, variables: Mapping[str, str]) -> Optional[str]:
        """Render the part preceding the ``[revision]`` path segment.

        Returns None when the pattern has no top-level ``[revision]``
        directory or a variable of the prefix is missing.
        """
        for index, chunk in enumerate(self.chunks):
            if chunk != Var("revision"):
                continue
            prefix = self.chunks[:index]
            following = self.chunks[index + 1] if index + 1 < len(self.chunks) else None
            if not isinstance(following, Const) or not following.text.startswith("/"):
                return None
            rendered = _render(prefix, variables)
            if rendered is None or not rendered.endswith("/"):
                return None
            return rendered
        return None
