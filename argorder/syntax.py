r"""
Minimal Rust syntax reader for static checks.

argorder never compiles Rust; it only needs the enums of a file, their
attributes and their variants. This module turns source text into exactly
that, in three passes:

1. tokenize(): comments are dropped (line, nested block and doc comments);
   identifiers (including raw r#idents), lifetimes, numbers, string literals
   (plain, raw r#"..."#, byte and C strings), character literals and
   punctuation become Tokens with 1-based line/column positions.
2. _trees(): tokens are folded into delimiter Groups ((), [], {}), checking
   that every opener is closed by its own closer.
3. _scan(): outer attributes are collected and attached to the next enum;
   brace groups that are not enum bodies (mod, fn, impl blocks) are searched
   recursively, so enums declared inside test functions are found too.

Attributes are parsed into structured key/value arguments (Meta), so
`#[command(name = "foo")]`, `#[command(about, name="foo")]` and multi-line
forms all read the same.

Errors
- SyntaxFault (a ValueError) for unterminated literals or comments,
  unexpected characters, unbalanced or mismatched delimiters and enums
  without a body. It carries .line and .column of the offending position.

Example
    >>> source = parse('#[derive(Subcommand)] enum Cmd { Add, #[command(name = "ls")] List }')
    >>> [variant.name for variant in source.enums[0].variants]
    ['Add', 'List']
    >>> source.enums[0].variants[1].attributes[0].get("name").literal
    'ls'
"""
import bisect
import logging
import re
from collections import namedtuple

logger = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {value: key for key, value in _OPENERS.items()}
_PUNCTUATION = frozenset("+-*/%^!&|=<>@.,;:#$?~") | frozenset(_OPENERS) | frozenset(_CLOSERS)

_WHITESPACE = re.compile(r"\s+")
_IDENT = re.compile(r"(?:r#)?[^\W\d]\w*")
_NUMBER = re.compile(r"\d\w*(?:\.\d\w*)?")
_CHAR = re.compile(r"""b?'(?:[^'\\\r\n]|\\(?:[nrt\\0'"]|x[0-9a-fA-F]{2}|u\{[0-9a-fA-F_]{1,6}\}))'""")
_LIFETIME = re.compile(r"'(?:r#)?[^\W\d]\w*")
_RAW_STRING = re.compile(r'(?:b|c)?r(#*)"')
_STRING = re.compile(r'(?:b|c)?"')
_ESCAPE = re.compile(
    r"""\\(?:(?P<simple>[nrt\\0'"])|x(?P<hex>[0-9a-fA-F]{2})|u\{(?P<unicode>[0-9a-fA-F_]{1,6})\}|(?P<newline>\r?\n\s*))"""
)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}


class SyntaxFault(ValueError):
    """
    The text is not well-formed enough to be read as Rust.

    Attributes
    - reason: short description without position.
    - line / column: 1-based position of the problem.
    """

    def __init__(self, reason, /, line, column):
        super().__init__(f"{reason} at line {line}, column {column}")
        self.reason = reason
        self.line = line
        self.column = column


class Token(namedtuple("Token", "kind text line column")):
    """
    One lexical token.

    kind is one of "ident", "lifetime", "number", "string", "char", "punct".
    """
    __slots__ = ()

    @property
    def literal(self):
        """The decoded value of a string literal token, or None."""
        if self.kind != "string":
            return None
        if match := _RAW_STRING.match(self.text):
            return self.text[match.end():len(self.text) - 1 - len(match.group(1))]
        return _unescape(self.text[_STRING.match(self.text).end():-1])


class Group(namedtuple("Group", "delimiter tokens line column")):
    """A delimited token tree: delimiter is "(", "[" or "{"."""
    __slots__ = ()


class Meta(namedtuple("Meta", "path assigned tokens nested")):
    """
    One comma-separated argument inside an attribute's parentheses.

    - `flatten`          -> Meta("flatten", False, (), ())
    - `name = "ls"`      -> Meta("name", True, (<string token>,), ())
    - `group(id = "x")`  -> Meta("group", False, (), (Meta("id", ...),))
    """
    __slots__ = ()

    @property
    def literal(self):
        """The value of `key = "string"`, or None for anything else."""
        if self.assigned and len(self.tokens) == 1 and isinstance(self.tokens[0], Token):
            return self.tokens[0].literal
        return None

    @property
    def source(self):
        """Best-effort source text of the assigned value."""
        return _render(self.tokens)


class Attribute(namedtuple("Attribute", "path arguments tokens line")):
    """
    An outer attribute, `#[path(arguments...)]` or `#[path = tokens]`.
    """
    __slots__ = ()

    def get(self, key, /):
        """The last argument assigned to key (later arguments win), or None."""
        for meta in reversed(self.arguments):
            if meta.path == key and meta.assigned:
                return meta
        return None

    def flags(self):
        """Bare paths listed in the arguments, e.g. {"flatten"} or {"Debug", "clap::Subcommand"}."""
        return {meta.path for meta in self.arguments if not (meta.assigned or meta.nested or meta.tokens)}


Variant = namedtuple("Variant", "name attributes line")
Enum = namedtuple("Enum", "name attributes variants line")
SourceFile = namedtuple("SourceFile", "enums")


def _unescape(text):
    def replace(match):
        if simple := match.group("simple"):
            return _SIMPLE_ESCAPES[simple]
        if hex := match.group("hex"):
            return chr(int(hex, 16))
        if unicode := match.group("unicode"):
            return chr(int(unicode.replace("_", ""), 16))
        return ""
    return _ESCAPE.sub(replace, text)


def _render(tokens):
    parts = []
    for token in tokens:
        if isinstance(token, Group):
            parts.append(token.delimiter + _render(token.tokens) + _OPENERS[token.delimiter])
        else:
            parts.append(token.text)
    return " ".join(parts)


def tokenize(text, /):
    """
    Split Rust source text into Tokens, dropping whitespace and comments.

    Raises
    - SyntaxFault: unterminated comment/literal or a character Rust rejects.
    """
    if not isinstance(text, str):
        raise TypeError("tokenize() argument must be a string")

    starts = [0] + [match.end() for match in re.finditer(r"\n", text)]

    def position(offset):
        line = bisect.bisect_right(starts, offset)
        return line, offset - starts[line - 1] + 1

    def fault(reason, offset):
        return SyntaxFault(reason, *position(offset))

    tokens = []
    index, length = 0, len(text)

    while index < length:
        if match := _WHITESPACE.match(text, index):
            index = match.end()
            continue

        if text.startswith("//", index):
            end = text.find("\n", index)
            index = length if end < 0 else end
            continue

        if text.startswith("/*", index):
            depth, cursor = 1, index + 2
            while depth:
                opening, closing = text.find("/*", cursor), text.find("*/", cursor)
                if closing < 0:
                    raise fault("unterminated block comment", index)
                if 0 <= opening < closing:
                    depth, cursor = depth + 1, opening + 2
                else:
                    depth, cursor = depth - 1, closing + 2
            index = cursor
            continue

        if match := _RAW_STRING.match(text, index):
            end = text.find('"' + match.group(1), match.end())
            if end < 0:
                raise fault("unterminated raw string literal", index)
            end += 1 + len(match.group(1))
            tokens.append(Token("string", text[index:end], *position(index)))
            index = end
            continue

        if match := _STRING.match(text, index):
            cursor = match.end()
            while cursor < length and text[cursor] != '"':
                cursor += 2 if text[cursor] == "\\" else 1
            if cursor >= length:
                raise fault("unterminated string literal", index)
            tokens.append(Token("string", text[index:cursor + 1], *position(index)))
            index = cursor + 1
            continue

        if match := _CHAR.match(text, index):
            tokens.append(Token("char", match.group(), *position(index)))
            index = match.end()
            continue

        if text[index] == "'":
            if not (match := _LIFETIME.match(text, index)):
                raise fault("unterminated character literal", index)
            tokens.append(Token("lifetime", match.group(), *position(index)))
            index = match.end()
            continue

        if match := _IDENT.match(text, index):
            tokens.append(Token("ident", match.group(), *position(index)))
            index = match.end()
            continue

        if match := _NUMBER.match(text, index):
            tokens.append(Token("number", match.group(), *position(index)))
            index = match.end()
            continue

        if text.startswith("::", index):
            tokens.append(Token("punct", "::", *position(index)))
            index += 2
            continue

        if text[index] in _PUNCTUATION:
            tokens.append(Token("punct", text[index], *position(index)))
            index += 1
            continue

        raise fault(f"unexpected character {text[index]!r}", index)

    return tokens


def _trees(tokens):
    """Fold a flat token list into nested Groups, checking delimiter balance."""
    stack = [(None, [], 1, 1)]

    for token in tokens:
        if token.kind == "punct" and token.text in _OPENERS:
            stack.append((token.text, [], token.line, token.column))
        elif token.kind == "punct" and token.text in _CLOSERS:
            if len(stack) == 1:
                raise SyntaxFault(f"unexpected closing delimiter {token.text!r}", token.line, token.column)
            delimiter, items, line, column = stack.pop()
            if _OPENERS[delimiter] != token.text:
                raise SyntaxFault(
                    f"mismatched closing delimiter {token.text!r} for {delimiter!r} opened at line {line}",
                    token.line,
                    token.column,
                )
            stack[-1][1].append(Group(delimiter, tuple(items), line, column))
        else:
            stack[-1][1].append(token)

    if len(stack) > 1:
        delimiter, _, line, column = stack[-1]
        raise SyntaxFault(f"unclosed delimiter {delimiter!r}", line, column)

    return tuple(stack[0][1])


def _is_punct(tree, text):
    return isinstance(tree, Token) and tree.kind == "punct" and tree.text == text


def _is_ident(tree, text=None):
    return isinstance(tree, Token) and tree.kind == "ident" and (text is None or tree.text == text)


def _is_group(tree, delimiter):
    return isinstance(tree, Group) and tree.delimiter == delimiter


def _split(trees, separator=","):
    """Split a token sequence on top-level separators; a trailing separator adds no chunk."""
    chunks, current = [], []
    for tree in trees:
        if _is_punct(tree, separator):
            chunks.append(tuple(current))
            current = []
        else:
            current.append(tree)
    if current:
        chunks.append(tuple(current))
    return chunks


def _path(trees, index):
    """Read `a::b::c` starting at index; returns (path, next index)."""
    segments = []
    if index < len(trees) and _is_punct(trees[index], "::"):
        index += 1
    while index < len(trees) and _is_ident(trees[index]):
        segments.append(trees[index].text)
        index += 1
        if index + 1 < len(trees) and _is_punct(trees[index], "::") and _is_ident(trees[index + 1]):
            index += 1
        else:
            break
    return "::".join(segments), index


def _metas(trees):
    metas = []
    for chunk in _split(trees):
        path, index = _path(chunk, 0)
        if not path:
            # Free-form tokens (e.g. a literal in #[cfg_attr(...)]) carry no key.
            metas.append(Meta("", False, chunk, ()))
        elif index < len(chunk) and _is_punct(chunk[index], "="):
            metas.append(Meta(path, True, chunk[index + 1:], ()))
        elif index < len(chunk) and _is_group(chunk[index], "("):
            metas.append(Meta(path, False, (), tuple(_metas(chunk[index].tokens))))
        else:
            metas.append(Meta(path, False, chunk[index:], ()))
    return metas


def _attribute(group):
    path, index = _path(group.tokens, 0)
    if not path:
        raise SyntaxFault("expected attribute path", group.line, group.column)
    rest = group.tokens[index:]
    if rest and _is_group(rest[0], "("):
        return Attribute(path, tuple(_metas(rest[0].tokens)), rest[1:], group.line)
    if rest and _is_punct(rest[0], "="):
        return Attribute(path, (), rest[1:], group.line)
    return Attribute(path, (), rest, group.line)


def _outer_attributes(trees, index):
    """Collect consecutive `#[...]` attributes; returns (attributes, next index)."""
    attributes = []
    while index + 1 < len(trees) and _is_punct(trees[index], "#") and _is_group(trees[index + 1], "["):
        attributes.append(_attribute(trees[index + 1]))
        index += 2
    return attributes, index


def _skip_visibility(trees, index):
    if index < len(trees) and _is_ident(trees[index], "pub"):
        index += 1
        if index < len(trees) and _is_group(trees[index], "("):
            index += 1
    return index


def _variants(body):
    variants = []
    for chunk in _split(body.tokens):
        attributes, index = _outer_attributes(chunk, 0)
        index = _skip_visibility(chunk, index)
        if index >= len(chunk) or not _is_ident(chunk[index]):
            where = chunk[min(index, len(chunk) - 1)] if chunk else body
            raise SyntaxFault("expected enum variant name", where.line, where.column)
        variants.append(Variant(chunk[index].text, tuple(attributes), chunk[index].line))
    return tuple(variants)


def _scan(trees, enums):
    attributes = []
    index = 0

    while index < len(trees):
        tree = trees[index]

        if _is_punct(tree, "#"):
            if index + 1 < len(trees) and _is_group(trees[index + 1], "["):
                found, index = _outer_attributes(trees, index)
                attributes.extend(found)
                continue
            if (
                index + 2 < len(trees) and
                _is_punct(trees[index + 1], "!") and
                _is_group(trees[index + 2], "[")
            ):
                # Inner attributes (#![...]) belong to the enclosing item.
                index += 3
                continue

        if _is_ident(tree, "pub"):
            index = _skip_visibility(trees, index)
            continue

        if _is_ident(tree, "enum") and index + 1 < len(trees) and _is_ident(trees[index + 1]):
            name = trees[index + 1]
            cursor = index + 2
            while cursor < len(trees) and not _is_group(trees[cursor], "{") and not _is_punct(trees[cursor], ";"):
                cursor += 1
            if cursor >= len(trees) or not _is_group(trees[cursor], "{"):
                raise SyntaxFault(f"expected body for enum {name.text!r}", name.line, name.column)
            enums.append(Enum(name.text, tuple(attributes), _variants(trees[cursor]), name.line))
            logger.debug("found enum %s at line %d", name.text, name.line)
            attributes = []
            index = cursor + 1
            continue

        if _is_group(tree, "{"):
            _scan(tree.tokens, enums)

        attributes = []
        index += 1

    return enums


def parse(text, /):
    """
    Read the enums of a Rust source file.

    Returns
    - SourceFile(enums): every enum in source order, wherever it is nested.

    Raises
    - SyntaxFault: the text is not well-formed (see module notes).
    """
    return SourceFile(tuple(_scan(_trees(tokenize(text)), [])))


__all__ = (
    "SyntaxFault",
    "Token",
    "Group",
    "Meta",
    "Attribute",
    "Variant",
    "Enum",
    "SourceFile",
    "tokenize",
    "parse",
)
