"""
Via parser.

Parses source text against ``grammar.lark`` with lark's LALR parser, then
walks the parse tree into IR. Every tree node is dispatched on its rule tag
through ``_BUILDERS``; a tag the receiving builder does not expect raises
``UnsupportedRuleError`` because it means the grammar and the builders
disagree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from . import ir
from .errors import (
    ErrorContext,
    UnsupportedRuleError,
    ViaError,
    make_parse_error,
    source_snippet,
)

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text(encoding="utf-8")

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    start="file",
    propagate_positions=True,
    maybe_placeholders=False,
)


class Rule(str, Enum):
    """Rule tags of the Via grammar that reach a tree builder."""

    FILE = "file"
    RESOURCE = "resource"
    MODEL_SECTION = "model_section"
    FIELD_DECL = "field_decl"
    NAME_OPT = "name_opt"
    TYPE_REF = "type_ref"
    OPTIONAL_MARK = "optional_mark"
    FIELD_ATTR = "field_attr"
    SERIALIZE_ATTR = "serialize_attr"
    BOOL_LITERAL = "bool_literal"
    CONTROLLER_SECTION = "controller_section"
    PARAMS_SECTION = "params_section"
    PARAMS_PROFILE = "params_profile"
    PARAM_ENTRY_LIST = "param_entry_list"
    PARAM_ENTRY = "param_entry"
    RESPOND_WITH_SECTION = "respond_with_section"
    FORMAT_LIST = "format_list"
    ACTIONS_SECTION = "actions_section"
    ACTION_DECL = "action_decl"


# Human-readable names for terminals in syntax error messages
_TERMINAL_LABELS = {
    "IDENT": "identifier",
    "ACTION_BODY": 'action body ("""...""")',
    "$END": "end of input",
}

_Node = Tree | Token


@dataclass(frozen=True)
class _BuildContext:
    """Source location information shared by all builders for one file."""

    file: Path

    def locate(self, node: _Node) -> ErrorContext:
        line, column = _position(node)
        return ErrorContext(file=self.file, line=line, column=column)

    def unsupported(self, found: str, within: Rule, node: _Node) -> UnsupportedRuleError:
        return UnsupportedRuleError(found, within.value, self.locate(node))


# =============================================================================
# Public API
# =============================================================================


def parse_file(path: Path) -> list[ir.ResourceSpec]:
    """
    Parse a single ``.via`` file.

    Raises:
        ViaError: If the file cannot be read
        ParseError: If the source does not match the grammar
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ViaError(f"Failed to read Via file at {path}: {e}") from e
    return parse_str(text, path)


def parse_str(text: str, path: Path | str) -> list[ir.ResourceSpec]:
    """
    Parse Via source text into an ordered list of resources.

    Args:
        text: Source text
        path: Originating file path (for error reporting and ``file_path``)

    Returns:
        Resources in declaration order

    Raises:
        ParseError: On the first point where the source diverges from the grammar
        UnsupportedRuleError: If the parse tree contains a rule no builder expects
    """
    file = Path(path)
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as e:
        raise _syntax_error(e, text, file) from e

    ctx = _BuildContext(file=file)
    _, resources = _build(tree, ctx, Rule.FILE, within=Rule.FILE)
    logger.debug("Parsed %d resource(s) from %s", len(resources), file)
    return resources


# =============================================================================
# Dispatch
# =============================================================================


def _rule_of(node: _Node, ctx: _BuildContext, within: Rule) -> Rule:
    if isinstance(node, Token):
        raise ctx.unsupported(node.type, within, node)
    data = node.data
    name = data.value if isinstance(data, Token) else data
    try:
        return Rule(name)
    except ValueError:
        raise ctx.unsupported(name, within, node) from None


def _build(node: _Node, ctx: _BuildContext, *expected: Rule, within: Rule) -> tuple[Rule, Any]:
    """Build ``node`` with the builder registered for its rule tag."""
    rule = _rule_of(node, ctx, within)
    if rule not in expected:
        raise ctx.unsupported(rule.value, within, node)
    return rule, _BUILDERS[rule](node, ctx)


def _token(node: _Node, ctx: _BuildContext, *types: str, within: Rule) -> Token:
    """Expect a terminal of one of ``types``."""
    if isinstance(node, Token) and node.type in types:
        return node
    found = node.type if isinstance(node, Token) else _rule_of(node, ctx, within).value
    raise ctx.unsupported(found, within, node)


# =============================================================================
# Builders
# =============================================================================


def _build_file(tree: Tree, ctx: _BuildContext) -> list[ir.ResourceSpec]:
    resources: list[ir.ResourceSpec] = []
    for child in tree.children:
        _, resource = _build(child, ctx, Rule.RESOURCE, within=Rule.FILE)
        resources.append(resource)
    return resources


def _build_resource(tree: Tree, ctx: _BuildContext) -> ir.ResourceSpec:
    name_token, *items = tree.children
    name = _token(name_token, ctx, "IDENT", within=Rule.RESOURCE)

    # A repeated section replaces the earlier one
    sections: dict[str, Any] = {}
    for item in items:
        rule, section = _build(
            item, ctx, Rule.MODEL_SECTION, Rule.CONTROLLER_SECTION, within=Rule.RESOURCE
        )
        if rule is Rule.MODEL_SECTION:
            sections["model"] = section
        else:
            sections["controller"] = section

    return ir.ResourceSpec(name=name.value, file_path=str(ctx.file), **sections)


def _build_model_section(tree: Tree, ctx: _BuildContext) -> ir.ModelSpec:
    fields = [
        _build(child, ctx, Rule.FIELD_DECL, within=Rule.MODEL_SECTION)[1]
        for child in tree.children
    ]
    return ir.ModelSpec(fields=fields)


def _build_field_decl(tree: Tree, ctx: _BuildContext) -> ir.FieldSpec:
    name_node, type_node, *attr_nodes = tree.children
    _, (name, name_optional) = _build(name_node, ctx, Rule.NAME_OPT, within=Rule.FIELD_DECL)
    _, ty = _build(type_node, ctx, Rule.TYPE_REF, within=Rule.FIELD_DECL)

    directives: dict[str, Any] = {}
    for attr_node in attr_nodes:
        _, directive = _build(attr_node, ctx, Rule.FIELD_ATTR, within=Rule.FIELD_DECL)
        directives.update(directive)

    return ir.FieldSpec(
        name=name,
        ty=ty,
        optional=name_optional or ty.optional,
        attributes=ir.FieldAttributes(**directives),
    )


def _build_name_opt(tree: Tree, ctx: _BuildContext) -> tuple[str, bool]:
    ident, *rest = tree.children
    name = _token(ident, ctx, "IDENT", within=Rule.NAME_OPT)
    optional = False
    for mark in rest:
        _, optional = _build(mark, ctx, Rule.OPTIONAL_MARK, within=Rule.NAME_OPT)
    return name.value, optional


def _build_type_ref(tree: Tree, ctx: _BuildContext) -> ir.TypeRef:
    ident, *rest = tree.children
    name = _token(ident, ctx, "IDENT", within=Rule.TYPE_REF)
    optional = False
    for mark in rest:
        _, optional = _build(mark, ctx, Rule.OPTIONAL_MARK, within=Rule.TYPE_REF)
    return ir.TypeRef(name=name.value, optional=optional)


def _build_optional_mark(tree: Tree, ctx: _BuildContext) -> bool:
    return True


def _build_field_attr(tree: Tree, ctx: _BuildContext) -> dict[str, Any]:
    directives: dict[str, Any] = {}
    for child in tree.children:
        _, directive = _build(child, ctx, Rule.SERIALIZE_ATTR, within=Rule.FIELD_ATTR)
        directives.update(directive)
    return directives


def _build_serialize_attr(tree: Tree, ctx: _BuildContext) -> dict[str, Any]:
    (value_node,) = tree.children
    _, value = _build(value_node, ctx, Rule.BOOL_LITERAL, within=Rule.SERIALIZE_ATTR)
    return {"serialize": value}


def _build_bool_literal(tree: Tree, ctx: _BuildContext) -> bool:
    (literal,) = tree.children
    token = _token(literal, ctx, "TRUE", "FALSE", within=Rule.BOOL_LITERAL)
    return token.type == "TRUE"


def _build_controller_section(tree: Tree, ctx: _BuildContext) -> ir.ControllerSpec:
    # A repeated section replaces the earlier one
    sections: dict[str, Any] = {}
    for item in tree.children:
        rule, section = _build(
            item,
            ctx,
            Rule.PARAMS_SECTION,
            Rule.RESPOND_WITH_SECTION,
            Rule.ACTIONS_SECTION,
            within=Rule.CONTROLLER_SECTION,
        )
        if rule is Rule.PARAMS_SECTION:
            sections["params"] = section
        elif rule is Rule.RESPOND_WITH_SECTION:
            sections["respond_with"] = section
        else:
            sections["actions"] = section
    return ir.ControllerSpec(**sections)


def _build_params_section(tree: Tree, ctx: _BuildContext) -> list[ir.ParamsProfile]:
    return [
        _build(child, ctx, Rule.PARAMS_PROFILE, within=Rule.PARAMS_SECTION)[1]
        for child in tree.children
    ]


def _build_params_profile(tree: Tree, ctx: _BuildContext) -> ir.ParamsProfile:
    name_node, *rest = tree.children
    name = _token(name_node, ctx, "IDENT", "EDITABLE", within=Rule.PARAMS_PROFILE)
    kind: ir.EditableParams | ir.NamedParams
    if name.type == "EDITABLE":
        kind = ir.EditableParams()
    else:
        kind = ir.NamedParams(name=name.value)

    # A bracketed list and a single bare entry normalize to the same list
    entries: list[ir.ParamEntry] = []
    for child in rest:
        rule, built = _build(
            child, ctx, Rule.PARAM_ENTRY_LIST, Rule.PARAM_ENTRY, within=Rule.PARAMS_PROFILE
        )
        if rule is Rule.PARAM_ENTRY_LIST:
            entries.extend(built)
        else:
            entries.append(built)

    return ir.ParamsProfile(name=kind, entries=entries)


def _build_param_entry_list(tree: Tree, ctx: _BuildContext) -> list[ir.ParamEntry]:
    return [
        _build(child, ctx, Rule.PARAM_ENTRY, within=Rule.PARAM_ENTRY_LIST)[1]
        for child in tree.children
    ]


def _build_param_entry(tree: Tree, ctx: _BuildContext) -> ir.ParamEntry:
    (name_node,) = tree.children
    _, (name, optional) = _build(name_node, ctx, Rule.NAME_OPT, within=Rule.PARAM_ENTRY)
    return ir.ParamEntry(name=name, optional=optional)


def _build_respond_with_section(tree: Tree, ctx: _BuildContext) -> list[str]:
    (value,) = tree.children
    # A bare identifier is a list of one
    if isinstance(value, Token):
        return [_token(value, ctx, "IDENT", within=Rule.RESPOND_WITH_SECTION).value]
    _, formats = _build(value, ctx, Rule.FORMAT_LIST, within=Rule.RESPOND_WITH_SECTION)
    return formats


def _build_format_list(tree: Tree, ctx: _BuildContext) -> list[str]:
    return [
        _token(child, ctx, "IDENT", within=Rule.FORMAT_LIST).value for child in tree.children
    ]


def _build_actions_section(tree: Tree, ctx: _BuildContext) -> ir.AutoCrud | ir.ManualActions:
    actions = [
        _build(child, ctx, Rule.ACTION_DECL, within=Rule.ACTIONS_SECTION)[1]
        for child in tree.children
    ]
    if not actions:
        return ir.AutoCrud()
    return ir.ManualActions(actions=actions)


def _build_action_decl(tree: Tree, ctx: _BuildContext) -> ir.ActionSpec:
    name_node, *rest = tree.children
    name = _token(name_node, ctx, "IDENT", within=Rule.ACTION_DECL)
    body: str | None = None
    for child in rest:
        raw = _token(child, ctx, "ACTION_BODY", within=Rule.ACTION_DECL).value
        body = raw[3:-3]
    return ir.ActionSpec(name=name.value, body=body)


_BUILDERS: dict[Rule, Callable[[Tree, _BuildContext], Any]] = {
    Rule.FILE: _build_file,
    Rule.RESOURCE: _build_resource,
    Rule.MODEL_SECTION: _build_model_section,
    Rule.FIELD_DECL: _build_field_decl,
    Rule.NAME_OPT: _build_name_opt,
    Rule.TYPE_REF: _build_type_ref,
    Rule.OPTIONAL_MARK: _build_optional_mark,
    Rule.FIELD_ATTR: _build_field_attr,
    Rule.SERIALIZE_ATTR: _build_serialize_attr,
    Rule.BOOL_LITERAL: _build_bool_literal,
    Rule.CONTROLLER_SECTION: _build_controller_section,
    Rule.PARAMS_SECTION: _build_params_section,
    Rule.PARAMS_PROFILE: _build_params_profile,
    Rule.PARAM_ENTRY_LIST: _build_param_entry_list,
    Rule.PARAM_ENTRY: _build_param_entry,
    Rule.RESPOND_WITH_SECTION: _build_respond_with_section,
    Rule.FORMAT_LIST: _build_format_list,
    Rule.ACTIONS_SECTION: _build_actions_section,
    Rule.ACTION_DECL: _build_action_decl,
}


# =============================================================================
# Helpers
# =============================================================================


def _position(node: _Node) -> tuple[int, int]:
    if isinstance(node, Token):
        return node.line or 1, node.column or 1
    meta = node.meta
    if getattr(meta, "empty", True):
        return 1, 1
    return meta.line, meta.column


def _syntax_error(error: UnexpectedInput, text: str, file: Path):
    """Convert a lark error into a located ParseError."""
    line = error.line if isinstance(error.line, int) and error.line > 0 else text.count("\n") + 1
    column = error.column if isinstance(error.column, int) and error.column > 0 else 1

    if isinstance(error, UnexpectedToken):
        if error.token.type == "$END":
            message = "Unexpected end of input"
        else:
            message = f"Unexpected {_describe_terminal(error.token.type)} {error.token.value!r}"
        expected = error.accepts or error.expected
    elif isinstance(error, UnexpectedCharacters):
        message = f"Unexpected character {error.char!r}"
        expected = error.allowed or set()
    else:
        message = "Unexpected end of input"
        expected = getattr(error, "expected", None) or set()

    if expected:
        labels = sorted({_describe_terminal(name) for name in expected})
        message += f", expected one of: {', '.join(labels)}"

    return make_parse_error(
        message,
        file,
        line,
        column,
        snippet=source_snippet(text, line),
    )


def _describe_terminal(name: str) -> str:
    if name in _TERMINAL_LABELS:
        return _TERMINAL_LABELS[name]
    try:
        terminal = _PARSER.get_terminal(name)
    except KeyError:
        return name
    if terminal.pattern.type == "str":
        return f"'{terminal.pattern.value}'"
    return name.lower()
