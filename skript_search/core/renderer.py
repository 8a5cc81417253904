"""Rendering of syntax pattern lines into annotated tokens and HTML."""

from __future__ import annotations

import re
from dataclasses import dataclass
from html import escape
from typing import Iterable, List, Tuple, Union
from urllib.parse import quote

from .brackets import OPTIONAL_CLOSE, OPTIONAL_OPEN, find_closing
from .ranking import type_query

TYPE_SEPARATOR = "/"

_PLACEHOLDER_PATTERN = re.compile(r"%([^%]+)%")

OPTIONAL_STYLE = "color:var(--gray);"
SEPARATOR_STYLE = "color:var(--foreground);"


@dataclass(frozen=True)
class LiteralText:
    text: str


@dataclass(frozen=True)
class OptionalGroup:
    children: Tuple["ParsedToken", ...]


@dataclass(frozen=True)
class TypeLink:
    type_name: str


@dataclass(frozen=True)
class PlainSeparator:
    text: str = TYPE_SEPARATOR


ParsedToken = Union[LiteralText, OptionalGroup, TypeLink, PlainSeparator]


@dataclass(frozen=True)
class RenderedSyntax:
    """Token tree of one syntax line together with its markup."""

    tokens: Tuple[ParsedToken, ...]
    html: str


def _placeholder_tokens(text: str) -> List[ParsedToken]:
    tokens: List[ParsedToken] = []
    cursor = 0
    for match in _PLACEHOLDER_PATTERN.finditer(text):
        names = [name.strip() for name in match.group(1).split(TYPE_SEPARATOR)]
        names = [name for name in names if name]
        if not names:
            continue
        if match.start() > cursor:
            tokens.append(LiteralText(text[cursor : match.start()]))
        for position, name in enumerate(names):
            if position:
                tokens.append(PlainSeparator())
            tokens.append(TypeLink(name))
        cursor = match.end()
    if cursor < len(text):
        tokens.append(LiteralText(text[cursor:]))
    return tokens


def _merge_literals(tokens: Iterable[ParsedToken]) -> Tuple[ParsedToken, ...]:
    merged: List[ParsedToken] = []
    for token in tokens:
        if isinstance(token, LiteralText) and merged and isinstance(merged[-1], LiteralText):
            merged[-1] = LiteralText(merged[-1].text + token.text)
        else:
            merged.append(token)
    return tuple(merged)


def parse_line(line: str) -> Tuple[ParsedToken, ...]:
    """Parse one pattern line into a token tree.

    Optional groups are matched on the raw text first; type placeholders are
    then resolved inside each run of literal text, so a placeholder never
    straddles an optional group boundary. An unbalanced ``[`` stays literal.
    """

    tokens: List[ParsedToken] = []
    pending: List[str] = []
    index = 0
    while index < len(line):
        if line[index] == OPTIONAL_OPEN:
            end = find_closing(line, index, OPTIONAL_OPEN, OPTIONAL_CLOSE)
            if end is not None:
                tokens.extend(_placeholder_tokens("".join(pending)))
                pending = []
                tokens.append(OptionalGroup(parse_line(line[index + 1 : end - 1])))
                index = end
                continue
        pending.append(line[index])
        index += 1
    tokens.extend(_placeholder_tokens("".join(pending)))
    return _merge_literals(tokens)


def type_link_target(type_name: str) -> str:
    """Relative URL that reloads the page searching for ``type_name``."""

    return f"?q={quote(type_query(type_name), safe='')}"


def tokens_to_html(tokens: Iterable[ParsedToken]) -> str:
    parts: List[str] = []
    for token in tokens:
        if isinstance(token, LiteralText):
            parts.append(escape(token.text))
        elif isinstance(token, OptionalGroup):
            parts.append(
                f'<span class="syntax-optional" style="{OPTIONAL_STYLE}">'
                f"[{tokens_to_html(token.children)}]</span>"
            )
        elif isinstance(token, TypeLink):
            name = escape(token.type_name)
            target = escape(type_link_target(token.type_name))
            parts.append(f'<a href="{target}" class="type-link" data-type="{name}">{name}</a>')
        elif isinstance(token, PlainSeparator):
            parts.append(f'<span style="{SEPARATOR_STYLE}">{escape(token.text)}</span>')
    return "".join(parts)


def render(line: str) -> RenderedSyntax:
    """Render a syntax line into tokens and HTML-safe markup."""

    tokens = parse_line(line or "")
    return RenderedSyntax(tokens=tokens, html=tokens_to_html(tokens))


def render_html(line: str) -> str:
    return render(line).html


def iter_type_links(tokens: Iterable[ParsedToken]) -> Iterable[TypeLink]:
    for token in tokens:
        if isinstance(token, TypeLink):
            yield token
        elif isinstance(token, OptionalGroup):
            yield from iter_type_links(token.children)


def extract_types(line: str) -> List[str]:
    """Type names referenced by ``line``, in order of appearance."""

    return [link.type_name for link in iter_type_links(parse_line(line or ""))]


__all__ = [
    "LiteralText",
    "OptionalGroup",
    "ParsedToken",
    "PlainSeparator",
    "RenderedSyntax",
    "TypeLink",
    "extract_types",
    "iter_type_links",
    "parse_line",
    "render",
    "render_html",
    "tokens_to_html",
    "type_link_target",
]
