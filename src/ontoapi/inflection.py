"""
English inflection for schema, property and path names.

Names are usually camelCase or snake_case identifiers ("hasAuthor",
"research_project"), so only the trailing word goes through ``inflect`` and
the rest of the identifier is kept as is.
"""

import re

import inflect

_engine = inflect.engine()

_LAST_WORD_RE = re.compile(r"([A-Z]?[a-z0-9]+|[A-Z]+)$")


def _last_word(word: str) -> tuple[str, str]:
    """Split an identifier into (head, trailing word)."""
    m = _LAST_WORD_RE.search(word)
    if not m:
        return "", word
    return word[: m.start()], m.group(1)


def _match_case(template: str, replacement: str) -> str:
    if template.isupper() and len(template) > 1:
        return replacement.upper()
    if template[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _singular(word: str) -> str | None:
    # singular_noun returns False for words that are not plural
    single = _engine.singular_noun(word.lower())
    return single or None


def singularize(word: str) -> str:
    if not word:
        return word
    head, last = _last_word(word)
    single = _singular(last)
    if single is None:
        return word
    return head + _match_case(last, single)


def is_plural(word: str) -> bool:
    """True if the trailing word of ``word`` already reads as a plural."""
    if not word:
        return False
    _, last = _last_word(word)
    return _singular(last) is not None


def pluralize(word: str) -> str:
    """Plural of the trailing word; plurals are returned unchanged."""
    if not word or is_plural(word):
        return word
    head, last = _last_word(word)
    return head + _match_case(last, _engine.plural_noun(last.lower()))


def to_kebab_case(name: str) -> str:
    """``ResearchProject`` / ``research_project`` -> ``research-project``."""
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name)
    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", s)
    return re.sub(r"[_\s]+", "-", s).lower()
