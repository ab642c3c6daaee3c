"""Content minifiers for Pagelink.

This module reduces the size of textual theme assets. Each supported
media type maps to exactly one transform; the table is fixed and there is
no runtime registration.

Key objects:
- MINIFIERS: Media type to transform table.
- minify: Apply the transform for a media type to raw bytes.

Transforms only remove whitespace and comments. Stylesheets go through
rcssmin and scripts through rjsmin; neither rewrites values or renames
identifiers. Both kinds of input are scanned first so that unterminated
comments, strings or brackets fail loudly instead of producing mangled
output. When a transform does not make the content smaller, the original
bytes are returned unchanged.
"""

from __future__ import annotations

from collections.abc import Callable

from rcssmin import cssmin
from rjsmin import jsmin

from .errors import MinifyError, UnsupportedMediaType

CSS_MEDIA_TYPE = "text/css"
JS_MEDIA_TYPE = "text/javascript"

# Keywords after which a "/" starts a regular expression, not a division.
_JS_REGEX_KEYWORDS = frozenset(
    {
        "await",
        "case",
        "delete",
        "do",
        "else",
        "in",
        "instanceof",
        "new",
        "of",
        "return",
        "throw",
        "typeof",
        "void",
        "yield",
    }
)
_JS_OPENERS = {")": "(", "]": "[", "}": "{"}


def minify_css(text: str) -> str:
    """Minify a stylesheet after checking that it is well formed.

    Args:
        text: Stylesheet source.

    Returns:
        Minified stylesheet.

    Raises:
        MinifyError: On unterminated comments or strings, or unbalanced braces.
    """
    check_css_structure(text)
    return cssmin(text)


def minify_js(text: str) -> str:
    """Minify a script with rjsmin after checking that it is well formed."""
    check_js_structure(text)
    return jsmin(text)


MINIFIERS: dict[str, Callable[[str], str]] = {
    CSS_MEDIA_TYPE: minify_css,
    JS_MEDIA_TYPE: minify_js,
}


def minify(media_type: str, data: bytes) -> bytes:
    """Minify raw asset bytes.

    Args:
        media_type: One of the media types in MINIFIERS.
        data: Source bytes, UTF-8 encoded (a leading BOM is accepted).

    Returns:
        Minified bytes, never longer than ``data``.

    Raises:
        UnsupportedMediaType: If ``media_type`` has no transform.
        MinifyError: If the content is not UTF-8 or cannot be minified.
    """
    transform = MINIFIERS.get(media_type)
    if transform is None:
        raise UnsupportedMediaType(media_type)

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MinifyError(f"{media_type} content is not valid UTF-8: {exc}") from exc

    try:
        minified = transform(text).encode("utf-8")
    except MinifyError:
        raise
    except Exception as exc:
        raise MinifyError(f"{media_type} minifier failed: {exc}") from exc

    if len(minified) >= len(data):
        return data
    return minified


def check_css_structure(text: str) -> None:
    """Reject stylesheets the minifier could silently mangle.

    Scans the stylesheet tracking comments, quoted strings, escapes and
    brace depth.

    Raises:
        MinifyError: On the first structural problem found.
    """
    depth = 0
    line = 1
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\n":
            line += 1
        elif ch == "\\":
            # escaped character, e.g. the brace in ".a\{b"
            if text.startswith("\n", i + 1):
                line += 1
            i += 2
            continue
        elif ch == "/" and text.startswith("*", i + 1):
            end = text.find("*/", i + 2)
            if end == -1:
                raise MinifyError(f"unterminated comment starting on line {line}")
            line += text.count("\n", i, end)
            i = end + 2
            continue
        elif ch in "\"'":
            i, line = _skip_string(text, i, line)
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise MinifyError(f"unexpected '}}' on line {line}")
        i += 1
    if depth:
        raise MinifyError(f"{depth} unclosed '{{' at end of stylesheet")


def check_js_structure(text: str) -> None:
    """Reject scripts the minifier could silently mangle.

    This is a lexical scan, not a parser. It follows comments, string,
    template and regular expression literals, and requires ``()``, ``[]``
    and ``{}`` to nest properly.

    Raises:
        MinifyError: On the first structural problem found.
    """
    stack: list[tuple[str, int]] = []
    line = 1
    i = 0
    length = len(text)
    regex_allowed = True

    if text.startswith("#!"):
        end = text.find("\n")
        i = length if end == -1 else end

    while i < length:
        ch = text[i]
        if ch == "\n":
            line += 1
            i += 1
        elif ch in " \t\r\f\v":
            i += 1
        elif ch == "/" and text.startswith("/", i + 1):
            end = text.find("\n", i)
            i = length if end == -1 else end
        elif ch == "/" and text.startswith("*", i + 1):
            end = text.find("*/", i + 2)
            if end == -1:
                raise MinifyError(f"unterminated comment starting on line {line}")
            line += text.count("\n", i, end)
            i = end + 2
        elif ch in "\"'":
            i, line = _skip_string(text, i, line, allow_continuation=True)
            regex_allowed = False
        elif ch == "`":
            i, line, regex_allowed = _enter_template(text, i + 1, line, stack)
        elif ch == "/" and regex_allowed:
            i = _skip_regex(text, i, line)
            regex_allowed = False
        elif ch in "([{":
            stack.append((ch, line))
            regex_allowed = True
            i += 1
        elif ch in ")]}":
            if not stack:
                raise MinifyError(f"unexpected {ch!r} on line {line}")
            opener, opened_on = stack.pop()
            if opener == "${" and ch == "}":
                i, line, regex_allowed = _enter_template(text, i + 1, line, stack)
                continue
            if opener != _JS_OPENERS[ch]:
                raise MinifyError(
                    f"{ch!r} on line {line} does not match {opener!r} from line {opened_on}"
                )
            regex_allowed = ch == "}"
            i += 1
        elif ch.isalnum() or ch in "_$" or ch > "\x7f":
            start = i
            while i < length and (text[i].isalnum() or text[i] in "_$" or text[i] > "\x7f"):
                i += 1
            regex_allowed = text[start:i] in _JS_REGEX_KEYWORDS
        elif ch in "+-" and text.startswith(ch, i + 1):
            # "x++ / 2" divides; the operand before ++/-- decides
            i += 2
        else:
            regex_allowed = True
            i += 1

    if stack:
        opener, opened_on = stack[-1]
        raise MinifyError(f"unclosed {opener!r} opened on line {opened_on}")


def _skip_string(
    text: str, start: int, line: int, allow_continuation: bool = False
) -> tuple[int, int]:
    """Return the index just past the string literal opening at ``start``."""
    quote = text[start]
    opened_on = line
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            if text.startswith("\n", i + 1):
                line += 1
            i += 2
            continue
        if ch == quote:
            return i + 1, line
        if ch == "\n":
            break
        i += 1
    raise MinifyError(f"unterminated string on line {opened_on}")


def _enter_template(
    text: str, i: int, line: int, stack: list[tuple[str, int]]
) -> tuple[int, int, bool]:
    """Scan template literal text from ``i``.

    Returns the index to resume at, the current line, and whether a
    regular expression may follow. Entering a ``${`` substitution pushes it
    on ``stack``; its closing brace resumes the template.
    """
    opened_on = line
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            if text.startswith("\n", i + 1):
                line += 1
            i += 2
            continue
        if ch == "`":
            return i + 1, line, False
        if ch == "$" and text.startswith("{", i + 1):
            stack.append(("${", line))
            return i + 2, line, True
        if ch == "\n":
            line += 1
        i += 1
    raise MinifyError(f"unterminated template literal starting on line {opened_on}")


def _skip_regex(text: str, start: int, line: int) -> int:
    """Return the index just past the regular expression body at ``start``."""
    in_class = False
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            break
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            return i + 1
        i += 1
    raise MinifyError(f"unterminated regular expression on line {line}")
