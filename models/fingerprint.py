from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType


class TermType(IntEnum):
    """Kind of a term, stored as `term_in_language.type_id`."""

    LABEL = 1
    DESCRIPTION = 2
    ALIAS = 3


@dataclass(frozen=True)
class Term:
    language: str
    text: str
    type: TermType


def _clean_terms(kind: str, terms: Mapping[str, str] | None) -> dict[str, str]:
    out: dict[str, str] = {}
    for language, text in (terms or {}).items():
        if not isinstance(language, str) or not language:
            raise ValueError(f"{kind} language code must be a non-empty string")
        if not isinstance(text, str):
            raise TypeError(f"{kind} text for {language!r} must be a string")
        # An empty text means "no term in this language".
        if text:
            out[language] = text
    return out


def _clean_alias_groups(
    groups: Mapping[str, Iterable[str]] | None,
) -> dict[str, tuple[str, ...]]:
    out: dict[str, tuple[str, ...]] = {}
    for language, aliases in (groups or {}).items():
        if not isinstance(language, str) or not language:
            raise ValueError("alias language code must be a non-empty string")
        if isinstance(aliases, str):
            raise TypeError(
                f"aliases for {language!r} must be an iterable of strings, not a string"
            )
        # dict.fromkeys keeps the first occurrence of each alias, in order.
        cleaned = tuple(dict.fromkeys(a for a in aliases if a))
        if cleaned:
            out[language] = cleaned
    return out


@dataclass(frozen=True)
class Fingerprint:
    """Labels, descriptions and alias groups of one entity, across languages.

    - `labels`: language -> text (at most one per language)
    - `descriptions`: language -> text (at most one per language)
    - `alias_groups`: language -> aliases, in insertion order, without
      duplicates

    Normalization on construction:
    - empty texts are dropped, so `{"en": ""}` is the same as no English label
    - duplicate aliases keep their first occurrence
    - alias groups that end up empty are dropped

    Equality compares the three mappings; alias order inside a group counts.
    The mappings are read-only views, so instances are hashable and can be
    used as dict keys or set members.
    """

    labels: Mapping[str, str] = field(default_factory=dict)
    descriptions: Mapping[str, str] = field(default_factory=dict)
    alias_groups: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "labels", MappingProxyType(_clean_terms("label", self.labels))
        )
        object.__setattr__(
            self,
            "descriptions",
            MappingProxyType(_clean_terms("description", self.descriptions)),
        )
        object.__setattr__(
            self,
            "alias_groups",
            MappingProxyType(_clean_alias_groups(self.alias_groups)),
        )

    def __hash__(self) -> int:
        return hash(
            (
                frozenset(self.labels.items()),
                frozenset(self.descriptions.items()),
                frozenset(self.alias_groups.items()),
            )
        )

    def is_empty(self) -> bool:
        return not (self.labels or self.descriptions or self.alias_groups)

    def iter_terms(self) -> Iterator[Term]:
        """Decompose into single terms: labels, then descriptions, then aliases."""
        for language, text in self.labels.items():
            yield Term(language, text, TermType.LABEL)
        for language, text in self.descriptions.items():
            yield Term(language, text, TermType.DESCRIPTION)
        for language, aliases in self.alias_groups.items():
            for alias in aliases:
                yield Term(language, alias, TermType.ALIAS)
