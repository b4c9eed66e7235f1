"""
Utility functions for code generation.

Contains type mappings, naming conventions and the field views shared by the
model, controller and client type generators.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Iterable
from dataclasses import dataclass
from textwrap import dedent

from via.core import ir

GENERATED_NOTICE = "Generated from Via - DO NOT EDIT."

# Type mappings from Via type names (lowercased) to Python and TypeScript
PYTHON_TYPES = {
    "string": "str",
    "text": "str",
    "str": "str",
    "int": "int",
    "integer": "int",
    "i32": "int",
    "i64": "int",
    "u32": "int",
    "u64": "int",
    "float": "float",
    "f32": "float",
    "f64": "float",
    "decimal": "float",
    "double": "float",
    "bool": "bool",
    "boolean": "bool",
    "datetime": "datetime",
    "timestamp": "datetime",
    "date": "date",
    "uuid": "UUID",
    "json": "Any",
}

TS_TYPES = {
    "string": "string",
    "text": "string",
    "str": "string",
    "int": "number",
    "integer": "number",
    "i32": "number",
    "i64": "number",
    "u32": "number",
    "u64": "number",
    "float": "number",
    "f32": "number",
    "f64": "number",
    "decimal": "number",
    "double": "number",
    "bool": "boolean",
    "boolean": "boolean",
    "datetime": "string",
    "timestamp": "string",
    "date": "string",
    "uuid": "string",
    "json": "unknown",
}

# Module each non-builtin Python annotation is imported from
PYTHON_TYPE_MODULES = {
    "Any": "typing",
    "Optional": "typing",
    "date": "datetime",
    "datetime": "datetime",
    "UUID": "uuid",
}

# Names imported by every generated model module
MODEL_MODULE_NAMES = frozenset(
    {"Any", "Optional", "BaseModel", "ConfigDict", "Field", "date", "datetime", "UUID"}
)

# Reserved words and built-in type names a TypeScript interface cannot take
TS_RESERVED_WORDS = frozenset(
    {
        "any", "bigint", "boolean", "break", "case", "catch", "class", "const",
        "continue", "debugger", "default", "delete", "do", "else", "enum",
        "export", "extends", "false", "finally", "for", "function", "if",
        "implements", "import", "in", "instanceof", "interface", "let", "never",
        "new", "null", "number", "object", "package", "private", "protected",
        "public", "return", "static", "string", "super", "switch", "symbol",
        "this", "throw", "true", "try", "typeof", "undefined", "unknown", "var",
        "void", "while", "with", "yield",
    }
)


def python_type(ty: ir.TypeRef) -> str:
    """Get the Python annotation for a Via type (without optionality)."""
    return PYTHON_TYPES.get(ty.name.lower(), "Any")


def ts_type(ty: ir.TypeRef) -> str:
    """Get the TypeScript type for a Via type (without optionality)."""
    return TS_TYPES.get(ty.name.lower(), "unknown")


def render_imports(names: set[str]) -> list[str]:
    """Render sorted ``from x import y`` lines for the given annotation names."""
    by_module: dict[str, set[str]] = {}
    for name in names:
        module = PYTHON_TYPE_MODULES.get(name)
        if module:
            by_module.setdefault(module, set()).add(name)
    return [
        f"from {module} import {', '.join(sorted(by_module[module]))}" for module in sorted(by_module)
    ]


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    return "".join(word[:1].upper() + word[1:] for word in name.split("_") if word)


def pluralize(word: str) -> str:
    """Simple pluralization of English words."""
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


def module_name(resource_name: str) -> str:
    """File and module name for a resource, e.g. ``BlogPost`` -> ``blog_post``."""
    name = snake_case(resource_name)
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def class_name(resource_name: str) -> str:
    """
    Python class and TypeScript interface name for a resource.

    Python keywords, TypeScript reserved words and names a model module
    imports get a trailing underscore, e.g. ``class`` -> ``class_``.
    """
    if (
        keyword.iskeyword(resource_name)
        or resource_name in MODEL_MODULE_NAMES
        or resource_name in TS_RESERVED_WORDS
    ):
        return f"{resource_name}_"
    return resource_name


def python_attribute(name: str) -> str:
    """
    Python attribute name for a field.

    Keywords get a trailing underscore. Names pydantic reserves (leading
    underscore, ``model_`` prefix) get a ``field_`` prefix. A renamed
    attribute is always aliased back to the declared name.
    """
    if keyword.iskeyword(name):
        return f"{name}_"
    if name.startswith("_") or name.startswith("model_"):
        return f"field_{name.lstrip('_')}"
    return name


def python_attributes(names: Iterable[str]) -> list[str]:
    """
    Attribute names for the fields of one class, in order.

    Declared names that need no renaming keep their attribute. A renamed
    field gets trailing underscores until it collides with no other
    attribute of the class.
    """
    names = list(names)
    taken = {name for name in names if python_attribute(name) == name}
    attributes = []
    for name in names:
        attr = python_attribute(name)
        if attr != name:
            while attr in taken:
                attr += "_"
            taken.add(attr)
        attributes.append(attr)
    return attributes


def effective_fields(resource: ir.ResourceSpec) -> list[ir.FieldSpec]:
    """
    Fields as they appear in every generated artifact.

    A repeated field name keeps its first position and takes its last
    declaration, which is how Python class bodies treat redefinition.
    """
    by_name: dict[str, ir.FieldSpec] = {}
    for field in resource.fields:
        by_name[field.name] = field
    return list(by_name.values())


def visible_fields(resource: ir.ResourceSpec) -> list[ir.FieldSpec]:
    """Fields present in the serialized and client-visible representation."""
    return [f for f in effective_fields(resource) if f.is_serialized]


@dataclass(frozen=True)
class ParamField:
    """A params profile entry resolved against the resource's model."""

    name: str
    ty: ir.TypeRef
    optional: bool


def resolve_params(resource: ir.ResourceSpec, profile: ir.ParamsProfile | None) -> list[ParamField]:
    """
    Resolve profile entries to typed fields.

    An entry is optional if it or its model field is optional. An entry
    naming no model field is typed ``Json``. Repeated entries collapse like
    repeated fields.
    """
    if profile is None:
        return []
    resolved: dict[str, ParamField] = {}
    for entry in profile.entries:
        field = resource.model.get_field(entry.name) if resource.model else None
        if field is None:
            resolved[entry.name] = ParamField(entry.name, ir.TypeRef(name="Json"), entry.optional)
        else:
            resolved[entry.name] = ParamField(entry.name, field.ty, entry.optional or field.optional)
    return list(resolved.values())


def indent_block(text: str, spaces: int = 4) -> list[str]:
    """
    Dedent ``text`` and re-indent every non-blank line by ``spaces``.

    Leading and trailing blank lines are dropped.
    """
    lines = dedent(text.expandtabs(4)).strip("\n").split("\n")
    pad = " " * spaces
    return [pad + line.rstrip() if line.strip() else "" for line in lines]
