"""core.structured

Best-effort recovery of a JSON object from LLM-produced text.

Models asked to "return only a JSON object" routinely wrap it in prose or a
fenced code block, leave keys unquoted, use single quotes, keep trailing
commas or emit bare words as values. `extract_structured` tries the text as
is, then a fixed list of candidate spans, each first verbatim and then after
a chain of string-level repairs. The first candidate that parses into an
object (and passes the optional shape check) wins; otherwise the result is
``None``. Nothing in this module raises.

Both lists below are ordered from strictest to most permissive, and every
entry is a pure ``str -> str`` (or ``str -> str | None``) function.
"""

from __future__ import annotations

import json
import logging
import re
from functools import reduce
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Regular-expression helpers
# ---------------------------------------------------------------------------

_FLAT_OBJECT = re.compile(r'\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}')
_OUTER_BRACES = re.compile(r'\{[\s\S]*\}')
_FENCED_JSON = re.compile(r'```json[ \t]*\n?([\s\S]*?)```', re.IGNORECASE)
_FENCED_ANY = re.compile(r'```[\w+-]*[ \t]*\n?([\s\S]*?)```')

_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')
_BARE_KEY = re.compile(r'([{,]\s*)([A-Za-z_$][\w$-]*)(\s*:)')
_TRAILING_COMMA = re.compile(r',(\s*[}\]])')
_BARE_VALUE = re.compile(r'(:\s*)([A-Za-z_][\w\-|. \t]*?)(\s*)(?=[,}\]])')
_QUOTED_SCALAR = re.compile(r':(\s*)"(-?(?:0|[1-9]\d*)(?:\.\d*[1-9])?|true|false)"')
_ARRAY = re.compile(r'\[\s*([^\[\]]*?)\s*\]')
_NUMBER = re.compile(r'-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?')

_LITERALS = frozenset({'true', 'false', 'null'})


# ---------------------------------------------------------------------------
# Candidate extractors
# ---------------------------------------------------------------------------


def _open_depth(text: str) -> int:
    """Number of ``{`` in *text* still unclosed, ignoring string literals."""
    depth = 0
    for segment in _STRING_LITERAL.split(text):
        for ch in segment:
            if ch == '{':
                depth += 1
            elif ch == '}' and depth:
                depth -= 1
    return depth


def flat_object(text: str) -> str | None:
    """First top-level object with at most one level of nesting.

    Matches that sit inside an enclosing ``{`` are skipped, so a fragment of
    a truncated object is never returned.
    """
    for m in _FLAT_OBJECT.finditer(text):
        if not _open_depth(text[: m.start()]):
            return m.group(0)
    return None


def outer_braces(text: str) -> str | None:
    """Everything from the first ``{`` to the last ``}``."""
    m = _OUTER_BRACES.search(text)
    return m.group(0) if m else None


def fenced_json_block(text: str) -> str | None:
    """Body of the first ```` ```json ```` fenced block."""
    m = _FENCED_JSON.search(text)
    return m.group(1).strip() if m else None


def fenced_block(text: str) -> str | None:
    """Body of the first fenced block, whatever its language tag."""
    m = _FENCED_ANY.search(text)
    return m.group(1).strip() if m else None


CANDIDATE_EXTRACTORS: tuple[Callable[[str], str | None], ...] = (
    flat_object,
    outer_braces,
    fenced_json_block,
    fenced_block,
)


# ---------------------------------------------------------------------------
# Sanitizers
# ---------------------------------------------------------------------------


def _outside_strings(text: str, transform: Callable[[str], str]) -> str:
    """Apply *transform* to the parts of *text* between string literals."""
    parts: list[str] = []
    last = 0
    for m in _STRING_LITERAL.finditer(text):
        parts.append(transform(text[last : m.start()]))
        parts.append(m.group(0))
        last = m.end()
    parts.append(transform(text[last:]))
    return ''.join(parts)


def convert_single_quotes(text: str) -> str:
    """Rewrite ``'single quoted'`` strings as double-quoted JSON strings.

    Apostrophes inside double-quoted strings are left alone.
    """
    out: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote is None:
            if ch in '"\'':
                quote = ch
                out.append('"')
            else:
                out.append(ch)
        elif ch == '\\' and i + 1 < len(text):
            nxt = text[i + 1]
            out.append("'" if quote == "'" and nxt == "'" else ch + nxt)
            i += 2
            continue
        elif ch == quote:
            quote = None
            out.append('"')
        elif ch == '"':
            out.append('\\"')
        else:
            out.append(ch)
        i += 1
    return ''.join(out)


def quote_bare_keys(text: str) -> str:
    """``{name: 1}`` → ``{"name": 1}``."""
    return _outside_strings(text, lambda s: _BARE_KEY.sub(r'\1"\2"\3', s))


def remove_trailing_commas(text: str) -> str:
    """``[1, 2,]`` → ``[1, 2]``."""
    return _outside_strings(text, lambda s: _TRAILING_COMMA.sub(r'\1', s))


def _quote_value(m: re.Match[str]) -> str:
    value = m.group(2).strip()
    if value in _LITERALS:
        return m.group(0)
    return f'{m.group(1)}{json.dumps(value)}{m.group(3)}'


def quote_bare_values(text: str) -> str:
    """``{"level": expert}`` → ``{"level": "expert"}``; literals are kept."""
    return _outside_strings(text, lambda s: _BARE_VALUE.sub(_quote_value, s))


def unquote_scalars(text: str) -> str:
    """``{"score": "7"}`` → ``{"score": 7}``, likewise for booleans.

    Only strings that read back unchanged as a JSON number are unquoted;
    ``"02139"`` and ``"1.10"`` stay strings.
    """
    return _QUOTED_SCALAR.sub(r':\1\2', text)


def _split_top_level(content: str) -> list[str]:
    items: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False
    for ch in content:
        if escaped:
            escaped = False
        elif ch == '\\' and quote is not None:
            escaped = True
        elif ch in '"\'':
            if quote is None:
                quote = ch
            elif ch == quote:
                quote = None
        elif ch == ',' and quote is None:
            items.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)
    if ''.join(current).strip():
        items.append(''.join(current).strip())
    return items


def _requote_item(item: str) -> str:
    if not item:
        return '""'
    if len(item) >= 2 and item[0] == item[-1] and item[0] in '"\'':
        return item if item[0] == '"' else json.dumps(item[1:-1])
    if item in _LITERALS or _NUMBER.fullmatch(item):
        return item
    return json.dumps(item)


def normalize_arrays(text: str) -> str:
    """Re-split malformed flat arrays on top-level commas and re-quote items.

    ``[foo, "bar", 3]`` → ``["foo", "bar", 3]``. Arrays that already parse,
    arrays holding objects and brackets inside string literals are untouched.
    """
    string_spans = [m.span() for m in _STRING_LITERAL.finditer(text)]

    def _inside_string(pos: int) -> bool:
        return any(start < pos < end for start, end in string_spans)

    def _rewrite(m: re.Match[str]) -> str:
        content = m.group(1)
        if _inside_string(m.start()) or '{' in content or '}' in content:
            return m.group(0)
        if not content.strip():
            return '[]'
        try:
            json.loads(f'[{content}]')
        except ValueError:
            return '[' + ', '.join(_requote_item(item) for item in _split_top_level(content)) + ']'
        return m.group(0)

    return _ARRAY.sub(_rewrite, text)


SANITIZERS: tuple[Callable[[str], str], ...] = (
    convert_single_quotes,
    quote_bare_keys,
    remove_trailing_commas,
    quote_bare_values,
    unquote_scalars,
    normalize_arrays,
)


def sanitize_json(text: str) -> str:
    """Run every sanitizer over *text*, in order."""
    return reduce(lambda acc, fn: fn(acc), SANITIZERS, text.strip())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _loads(text: str) -> Any:  # noqa: ANN401 - arbitrary JSON
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _accept(parsed: object, expected_keys: tuple[str, ...]) -> bool:
    if not isinstance(parsed, dict):
        return False
    return not expected_keys or any(key in parsed for key in expected_keys)


def extract_structured(text: str, expected_keys: Iterable[str] | None = None) -> dict[str, Any] | None:
    """Return the JSON object embedded in *text*, or ``None``.

    Parameters
    ----------
    text
        Raw model output.
    expected_keys
        Optional shape check: a parsed object is accepted only if it carries
        at least one of these top-level keys.

    """
    if not isinstance(text, str) or not text.strip():
        return None
    keys = tuple(expected_keys or ())

    parsed = _loads(text.strip())
    if _accept(parsed, keys):
        return parsed

    for extractor in CANDIDATE_EXTRACTORS:
        candidate = extractor(text)
        if not candidate:
            continue
        for attempt in (candidate, sanitize_json(candidate)):
            parsed = _loads(attempt)
            if _accept(parsed, keys):
                logger.debug('Recovered structured output via %s', extractor.__name__)
                return parsed
        logger.debug('Candidate from %s rejected', extractor.__name__, extra={'candidate': candidate[:200]})

    logger.warning('No valid JSON object found in model output', extra={'preview': text[:200]})
    return None
