"""Name tokenisation and naming-convention variant generation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

__all__ = [
    "MappingPair",
    "VARIANT_STRATEGIES",
    "generate_mappings",
    "join_camel",
    "join_concat_lower",
    "join_concat_upper",
    "join_kebab",
    "join_pascal",
    "join_pascal_snake",
    "join_snake",
    "join_upper_snake",
    "pascal_token",
    "tokenize",
]


_DELIMITERS = re.compile(r"[\W_]+")


@dataclass(frozen=True, slots=True, order=True)
class MappingPair:
    """An ``original`` string and the ``replacement`` it maps to."""

    original: str
    replacement: str

    def __post_init__(self) -> None:
        if not self.original or not self.replacement:
            msg = "mapping pairs must not have an empty side"
            raise ValueError(msg)

    def __iter__(self) -> Iterator[str]:
        yield self.original
        yield self.replacement


def tokenize(name: str) -> list[str]:
    """Split ``name`` into lowercase tokens.

    Names that already contain delimiters (``my-cool_app``) are split on every
    non-alphanumeric character. Anything else (``MyCoolApp``, ``acme``) is split
    on uppercase letters instead.
    """

    fragments = [fragment for fragment in _DELIMITERS.split(name) if fragment]
    if len(fragments) >= 2:
        return [fragment.lower() for fragment in fragments]

    tokens: list[str] = []
    current = ""
    for char in name:
        if char.isupper() and current:
            tokens.append(current.lower())
            current = ""
        current += char
    if current:
        tokens.append(current.lower())
    return tokens


def pascal_token(token: str) -> str:
    """Return ``token`` with an uppercase first letter and the rest lowercase."""

    return token.capitalize()


def join_kebab(tokens: Sequence[str]) -> str:
    return "-".join(tokens)


def join_snake(tokens: Sequence[str]) -> str:
    return "_".join(tokens)


def join_upper_snake(tokens: Sequence[str]) -> str:
    return "_".join(token.upper() for token in tokens)


def join_concat_lower(tokens: Sequence[str]) -> str:
    return "".join(tokens)


def join_concat_upper(tokens: Sequence[str]) -> str:
    return "".join(token.upper() for token in tokens)


def join_camel(tokens: Sequence[str]) -> str:
    if not tokens:
        return ""
    first, *rest = tokens
    return first + "".join(pascal_token(token) for token in rest)


def join_pascal(tokens: Sequence[str]) -> str:
    return "".join(pascal_token(token) for token in tokens)


def join_pascal_snake(tokens: Sequence[str]) -> str:
    return "_".join(pascal_token(token) for token in tokens)


VARIANT_STRATEGIES: tuple[tuple[str, Callable[[Sequence[str]], str]], ...] = (
    ("kebab", join_kebab),
    ("snake", join_snake),
    ("upper-snake", join_upper_snake),
    ("concat-lower", join_concat_lower),
    ("concat-upper", join_concat_upper),
    ("camel", join_camel),
    ("pascal", join_pascal),
    ("pascal-snake", join_pascal_snake),
)


def generate_mappings(original: Iterable[str], replacement: Iterable[str]) -> list[MappingPair]:
    """Pair every naming-convention variant of ``original`` with ``replacement``'s.

    Pairs with an empty side are dropped, duplicates are removed and the result
    is sorted lexically on ``(original, replacement)`` so that the replacement
    order is reproducible.
    """

    original_tokens = list(original)
    replacement_tokens = list(replacement)

    pairs: set[MappingPair] = set()
    for _, join in VARIANT_STRATEGIES:
        old = join(original_tokens)
        new = join(replacement_tokens)
        if old and new:
            pairs.add(MappingPair(old, new))
    return sorted(pairs)
