"""
Model generation.

Generates one pydantic model module per resource under ``src/models/``.
Fields keep their declared order; ``@serialize(false)`` fields are kept on
the model but excluded from ``model_dump`` and JSON output.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from via.core import ir

from .base import Generator
from .result import GenerationResult
from .utils import (
    GENERATED_NOTICE,
    class_name,
    effective_fields,
    module_name,
    python_attributes,
    python_type,
    render_imports,
)


@dataclass(frozen=True)
class ClassMember:
    """One field of a generated pydantic class."""

    name: str
    ty: ir.TypeRef
    optional: bool
    exclude: bool = False


@dataclass
class RenderedClass:
    lines: list[str]
    type_names: set[str]
    uses_field: bool


def render_pydantic_class(name: str, doc: str, members: Iterable[ClassMember]) -> RenderedClass:
    """Render a pydantic ``BaseModel`` subclass and report what it needs imported."""
    lines = [
        f"class {name}(BaseModel):",
        f'    """{doc}"""',
        "",
        "    model_config = ConfigDict(populate_by_name=True)",
    ]
    type_names: set[str] = set()
    uses_field = False

    members = list(members)
    if members:
        lines.append("")

    for member, attr in zip(members, python_attributes(m.name for m in members)):
        annotation = python_type(member.ty)
        type_names.add(annotation)
        if member.optional:
            annotation = f"Optional[{annotation}]"
            type_names.add("Optional")

        kwargs = []
        if member.optional:
            kwargs.append("default=None")
        if attr != member.name:
            kwargs.append(f'alias="{member.name}"')
        if member.exclude:
            kwargs.append("exclude=True")

        if kwargs == ["default=None"]:
            lines.append(f"    {attr}: {annotation} = None")
        elif kwargs:
            uses_field = True
            lines.append(f"    {attr}: {annotation} = Field({', '.join(kwargs)})")
        else:
            lines.append(f"    {attr}: {annotation}")

    return RenderedClass(lines=lines, type_names=type_names, uses_field=uses_field)


def model_members(resource: ir.ResourceSpec) -> list[ClassMember]:
    return [
        ClassMember(
            name=field.name,
            ty=field.ty,
            optional=field.optional,
            exclude=not field.is_serialized,
        )
        for field in effective_fields(resource)
    ]


def generate_model_module(resource: ir.ResourceSpec) -> str:
    """Generate the pydantic model module for a resource."""
    rendered = render_pydantic_class(
        class_name(resource.name), f"{resource.name} resource.", model_members(resource)
    )

    lines = [
        '"""',
        f"{resource.name} model.",
        GENERATED_NOTICE,
        '"""',
    ]
    type_imports = render_imports(rendered.type_names)
    lines.extend(type_imports)
    if type_imports:
        lines.append("")

    pydantic_names = ["BaseModel", "ConfigDict"]
    if rendered.uses_field:
        pydantic_names.append("Field")
    lines.append(f"from pydantic import {', '.join(pydantic_names)}")
    lines.append("")
    lines.append("")
    lines.extend(rendered.lines)

    return "\n".join(lines) + "\n"


class ModelGenerator(Generator):
    """Generates ``src/models/<resource>.py`` and the models package index."""

    def generate_resource(self, resource: ir.ResourceSpec) -> GenerationResult:
        result = GenerationResult()
        result.add_file(
            f"src/models/{module_name(resource.name)}.py",
            generate_model_module(resource),
        )
        return result

    def generate_aggregate(self, resources: list[ir.ResourceSpec]) -> GenerationResult:
        result = GenerationResult()

        lines = [
            '"""',
            "Generated models.",
            GENERATED_NOTICE,
            '"""',
        ]
        for resource in resources:
            lines.append(f"from .{module_name(resource.name)} import {class_name(resource.name)}")
        lines.append("")
        if resources:
            lines.append("__all__ = [")
            lines.extend(f'    "{class_name(resource.name)}",' for resource in resources)
            lines.append("]")
        else:
            lines.append("__all__: list[str] = []")

        result.add_file("src/models/__init__.py", "\n".join(lines) + "\n")
        return result
