"""
Client type generation.

Generates one TypeScript module per resource under ``ts/models/``. The
interface lists exactly the fields the model serializes, with the same
names, order and optionality, so backend and client shapes match.
"""

from __future__ import annotations

from via.core import ir

from .base import Generator
from .result import GenerationResult
from .utils import (
    GENERATED_NOTICE,
    ParamField,
    class_name,
    module_name,
    resolve_params,
    ts_type,
    visible_fields,
)


def _property(name: str, ty: ir.TypeRef, optional: bool) -> str:
    if optional:
        return f"  {name}?: {ts_type(ty)} | null;"
    return f"  {name}: {ts_type(ty)};"


def _interface(name: str, properties: list[str]) -> list[str]:
    if not properties:
        return [f"export interface {name} {{}}"]
    return [f"export interface {name} {{", *properties, "}"]


def generate_type_module(resource: ir.ResourceSpec) -> str:
    """Generate the TypeScript module for a resource."""
    name = class_name(resource.name)
    lines = [
        "/**",
        f" * {resource.name} client types.",
        f" * {GENERATED_NOTICE}",
        " */",
        "",
    ]

    lines.extend(
        _interface(name, [_property(f.name, f.ty, f.optional) for f in visible_fields(resource)])
    )
    lines.append("")
    lines.append(f"export type {name}Record = {name} & {{ id: number }};")

    controller = resource.controller or ir.ControllerSpec()
    if controller.editable_profile is not None:
        params: list[ParamField] = resolve_params(resource, controller.editable_profile)
        lines.append("")
        lines.extend(
            _interface(f"{name}Params", [_property(p.name, p.ty, p.optional) for p in params])
        )

    return "\n".join(lines) + "\n"


class TypeGenerator(Generator):
    """Generates ``ts/models/<resource>.ts`` and the ``index.ts`` barrel."""

    def generate_resource(self, resource: ir.ResourceSpec) -> GenerationResult:
        result = GenerationResult()
        result.add_file(f"ts/models/{module_name(resource.name)}.ts", generate_type_module(resource))
        return result

    def generate_aggregate(self, resources: list[ir.ResourceSpec]) -> GenerationResult:
        result = GenerationResult()
        lines = [
            "/**",
            " * Client types.",
            f" * {GENERATED_NOTICE}",
            " */",
            "",
        ]
        lines.extend(f'export * from "./{module_name(r.name)}";' for r in resources)
        result.add_file("ts/models/index.ts", "\n".join(lines) + "\n")
        return result
