"""
Parses CSS and formats it in a canonical, human-readable layout.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import re
from stylesnap.registry import StyleElement, get_styles_from_class_names
from stylesnap.util.cli import print_error
import sys
import tinycss2
from tinycss2 import ast

_INDENT = '  '
_WHITESPACE_RE = re.compile(r'\s+')


class CssSyntaxError(ValueError):
    def __init__(self, parse_error: ast.ParseError) -> None:
        super().__init__(
            f'{parse_error.message} '
            f'(line {parse_error.source_line}, column {parse_error.source_column})')
        self.parse_error = parse_error


class StyleParseError(ValueError):
    def __init__(self, css: str, parse_error: CssSyntaxError) -> None:
        super().__init__(f'There was an error parsing the following css: "{css}"')
        self.css = css
        self.parse_error = parse_error


# ------------------------------------------------------------------------------
# Parse

@dataclass(frozen=True)
class Declaration:
    name: str
    value: str
    important: bool


@dataclass(frozen=True)
class Rule:
    """
    A qualified rule (like `.x { ... }`) or an at-rule (like `@media ... { ... }`).

    An at-rule without a block (like `@import "x";`) has body None.
    """
    prelude: str
    body: list[Declaration | Rule] | None


class CssDocument:
    def __init__(self, rules: list[Rule]) -> None:
        self.rules = rules

    def __str__(self) -> str:
        return '\n\n'.join([_format_rule(r, 0) for r in self.rules])


def parse_css(source: str) -> CssDocument:
    """
    Parses a CSS stylesheet.

    Unlike browsers, which skip over malformed CSS, any malformed rule
    or declaration is treated as an error.

    Raises:
    * CssSyntaxError
    """
    nodes = tinycss2.parse_stylesheet(
        source, skip_comments=True, skip_whitespace=True)
    rules = _parse_rules(nodes)
    _ensure_blocks_closed(source)
    return CssDocument(rules)


def _parse_rules(nodes: Iterable[ast.Node]) -> list[Rule]:
    rules = []
    for node in nodes:
        if isinstance(node, ast.ParseError):
            raise CssSyntaxError(node)
        elif isinstance(node, ast.QualifiedRule):
            rules.append(Rule(
                _serialize_prelude(node.prelude),
                _parse_declarations(node.content)))
        elif isinstance(node, ast.AtRule):
            prelude = _serialize_prelude(node.prelude)
            rules.append(Rule(
                f'@{node.at_keyword} {prelude}' if prelude != '' else f'@{node.at_keyword}',
                _parse_at_rule_body(node.content)))
        else:
            # Whitespace and comments are skipped while parsing
            pass
    return rules


def _parse_at_rule_body(content: list[ast.Node] | None) -> list[Declaration | Rule] | None:
    if content is None:
        return None
    # @media, @supports, @keyframes, etc contain rules. @font-face, @page, etc contain declarations.
    if any(isinstance(token, ast.CurlyBracketsBlock) for token in content):
        return list(_parse_rules(tinycss2.parse_rule_list(
            content, skip_comments=True, skip_whitespace=True)))
    else:
        return _parse_declarations(content)


def _parse_declarations(content: list[ast.Node]) -> list[Declaration | Rule]:
    declarations = []  # type: list[Declaration | Rule]
    for node in tinycss2.parse_declaration_list(
            content, skip_comments=True, skip_whitespace=True):
        if isinstance(node, ast.ParseError):
            raise CssSyntaxError(node)
        elif isinstance(node, ast.Declaration):
            declarations.append(Declaration(
                node.name,
                tinycss2.serialize(node.value).strip(),
                node.important))
        elif isinstance(node, ast.AtRule):
            declarations.extend(_parse_rules([node]))
    return declarations


def _serialize_prelude(prelude: list[ast.Node]) -> str:
    return _WHITESPACE_RE.sub(' ', tinycss2.serialize(prelude)).strip()


_CLOSING_BRACKETS = {
    ast.CurlyBracketsBlock: '}',
    ast.SquareBracketsBlock: ']',
    ast.ParenthesesBlock: ')',
    ast.FunctionBlock: ')',
}

# Trailing whitespace and complete comments
_TRAILING_TRIVIA_RE = re.compile(r'(?:\s|/\*[^*]*\*+(?:[^/*][^*]*\*+)*/)*\Z')


def _ensure_blocks_closed(source: str) -> None:
    """
    Raises CssSyntaxError if a block is still open at the end of `source`.

    tinycss2 closes such blocks implicitly without reporting an error.
    Only the blocks that end the source can be unclosed, so only those
    are checked against the closing brackets at the end of `source`.
    """
    trailing_blocks = []
    nodes = tinycss2.parse_component_value_list(source, skip_comments=True)
    while True:
        significant = [n for n in nodes if not isinstance(n, ast.WhitespaceToken)]
        if len(significant) == 0 or type(significant[-1]) not in _CLOSING_BRACKETS:
            break
        block = significant[-1]
        trailing_blocks.append(block)
        nodes = block.arguments if isinstance(block, ast.FunctionBlock) else block.content

    # Closing brackets at the end of the source close the innermost blocks first
    tail = source
    closed_count = 0
    while closed_count < len(trailing_blocks):
        tail = _TRAILING_TRIVIA_RE.sub('', tail, count=1)
        if tail == '' or tail[-1] not in _CLOSING_BRACKETS.values():
            break
        tail = tail[:-1]
        closed_count += 1
    if closed_count < len(trailing_blocks):
        block = trailing_blocks[-1 - closed_count]
        raise CssSyntaxError(ast.ParseError(
            block.source_line, block.source_column,
            'eof-in-block', f"missing '{_CLOSING_BRACKETS[type(block)]}'"))


# ------------------------------------------------------------------------------
# Format

def _format_rule(rule: Rule, level: int) -> str:
    pad = _INDENT * level
    if rule.body is None:
        return f'{pad}{rule.prelude};'
    if len(rule.body) == 0:
        return f'{pad}{rule.prelude} {{}}'

    parts = []
    for (i, item) in enumerate(rule.body):
        if isinstance(item, Declaration):
            important = ' !important' if item.important else ''
            parts.append(f'{pad}{_INDENT}{item.name}: {item.value}{important};')
        else:
            if i > 0:
                parts.append('')
            parts.append(_format_rule(item, level + 1))
    return '\n'.join([f'{pad}{rule.prelude} {{', *parts, f'{pad}}}'])


# ------------------------------------------------------------------------------
# Styles for Class Names

def get_pretty_styles_from_class_names(
        class_names: list[str],
        elements: list[StyleElement],
        ) -> str:
    """
    Returns the formatted CSS of every registered rule that
    selects at least one of the specified class names.

    Raises:
    * StyleParseError -- if the registered CSS is malformed.
    """
    styles = get_styles_from_class_names(class_names, elements)
    try:
        return str(parse_css(styles))
    except CssSyntaxError as e:
        print_error(f'*** Unable to parse CSS: {e}', file=sys.stderr)
        raise StyleParseError(styles, e) from e
