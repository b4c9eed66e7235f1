"""
Controller generation.

Generates one FastAPI router module per resource under ``src/controllers/``.
AutoCrud controllers get list/show/create/update/delete handlers over an
in-module record store; manual controllers get exactly their declared
actions with bodies embedded verbatim.

The resource model is imported as ``_Model`` so no resource name can shadow
the framework names a router module imports.
"""

from __future__ import annotations

from textwrap import dedent
from typing import assert_never

from via.core import ir

from .base import Generator
from .models import ClassMember, RenderedClass, render_pydantic_class
from .result import GenerationResult
from .utils import (
    GENERATED_NOTICE,
    class_name,
    indent_block,
    module_name,
    pascal_case,
    pluralize,
    render_imports,
    resolve_params,
    snake_case,
)

# Action name -> (HTTP method, path suffix, takes record id)
CONVENTIONAL_ACTIONS = {
    "list": ("get", "", False),
    "index": ("get", "", False),
    "show": ("get", "/{id}", True),
    "create": ("post", "", False),
    "update": ("patch", "/{id}", True),
    "delete": ("delete", "/{id}", True),
    "destroy": ("delete", "/{id}", True),
}


def profile_class_name(model_class: str, kind: ir.EditableParams | ir.NamedParams) -> str:
    """Class name of the params model generated for a profile."""
    match kind:
        case ir.EditableParams():
            return f"{model_class}Params"
        case ir.NamedParams(name=name):
            return f"{model_class}{pascal_case(name)}Params"
        case _ as unreachable:
            assert_never(unreachable)


def response_formats(controller: ir.ControllerSpec, default_format: str) -> list[str]:
    """Declared response formats, or the single default when none are declared."""
    return list(controller.respond_with) or [default_format]


def _tuple_literal(values: list[str]) -> str:
    quoted = [f'"{v}"' for v in values]
    if len(quoted) == 1:
        return f"({quoted[0]},)"
    return f"({', '.join(quoted)})"


class ControllerGenerator(Generator):
    """Generates ``src/controllers/<resource>.py`` and the routers index."""

    def generate_resource(self, resource: ir.ResourceSpec) -> GenerationResult:
        result = GenerationResult()
        content = self.generate_controller_module(resource, result)
        result.add_file(f"src/controllers/{module_name(resource.name)}.py", content)
        return result

    def generate_aggregate(self, resources: list[ir.ResourceSpec]) -> GenerationResult:
        result = GenerationResult()

        lines = [
            '"""',
            "Generated API routers.",
            GENERATED_NOTICE,
            '"""',
        ]
        for resource in resources:
            module = module_name(resource.name)
            lines.append(f"from .{module} import router as {module}_router")
        lines.append("")
        lines.append("routers = [")
        lines.extend(f"    {module_name(r.name)}_router," for r in resources)
        lines.append("]")

        result.add_file("src/controllers/__init__.py", "\n".join(lines) + "\n")
        return result

    # Module assembly

    def generate_controller_module(self, resource: ir.ResourceSpec, result: GenerationResult) -> str:
        """Generate the router module for a resource, recording warnings on ``result``."""
        name = resource.name
        controller = resource.controller or ir.ControllerSpec()
        formats = response_formats(controller, self.config.default_format)

        params_classes = self._params_classes(resource, controller, result)
        type_names: set[str] = {"Any"}
        uses_field = False
        for rendered in params_classes:
            type_names |= rendered.type_names
            uses_field = uses_field or rendered.uses_field

        match controller.actions:
            case ir.AutoCrud():
                handlers = self._auto_crud_handlers(resource)
            case ir.ManualActions(actions=actions):
                handlers = self._manual_handlers(resource, controller, actions, result)
            case _ as unreachable:
                assert_never(unreachable)

        pydantic_names = ["BaseModel", "ConfigDict"]
        if uses_field:
            pydantic_names.append("Field")
        pydantic_names.append("ValidationError")

        lines = [
            '"""',
            f"{name} controller.",
            GENERATED_NOTICE,
            '"""',
            "import html",
            "import itertools",
            "import json",
            *render_imports(type_names),
            "",
            "from fastapi import APIRouter, HTTPException, Request",
            "from fastapi.encoders import jsonable_encoder",
            "from fastapi.responses import HTMLResponse, JSONResponse, Response",
            f"from pydantic import {', '.join(pydantic_names)}",
            "",
            f"from ..models.{module_name(name)} import {class_name(name)} as _Model",
            "",
            f"RESPONSE_FORMATS = {_tuple_literal(formats)}",
            f'DEFAULT_FORMAT = "{formats[0]}"',
            "",
            f'router = APIRouter(prefix="/{pluralize(snake_case(name))}", tags=["{name}"])',
            "",
            "_records: dict[int, _Model] = {}",
            "_ids = itertools.count(1)",
        ]

        for rendered in params_classes:
            lines.extend(["", ""])
            lines.extend(rendered.lines)

        lines.extend(["", ""])
        lines.append(self._helpers(name))

        for handler in handlers:
            lines.extend(["", ""])
            lines.append(handler)

        return "\n".join(lines) + "\n"

    def _params_classes(
        self,
        resource: ir.ResourceSpec,
        controller: ir.ControllerSpec,
        result: GenerationResult,
    ) -> list[RenderedClass]:
        name = resource.name
        cls = class_name(name)
        editable = resolve_params(resource, controller.editable_profile)
        classes = [
            render_pydantic_class(
                f"{cls}Params",
                "Fields accepted on create.",
                [ClassMember(p.name, p.ty, p.optional) for p in editable],
            )
        ]
        reserved = {f"{cls}Params"}

        if isinstance(controller.actions, ir.AutoCrud):
            classes.append(
                render_pydantic_class(
                    f"{cls}UpdateParams",
                    "Fields accepted on update; all optional for partial updates.",
                    [ClassMember(p.name, p.ty, True) for p in editable],
                )
            )
            reserved.add(f"{cls}UpdateParams")

        for profile in controller.named_profiles:
            params_class = profile_class_name(cls, profile.name)
            if params_class in reserved:
                result.add_warning(
                    f"Resource '{name}': params profile generates '{params_class}', "
                    "which is already defined; the profile is skipped"
                )
                continue
            reserved.add(params_class)
            members = [
                ClassMember(p.name, p.ty, p.optional) for p in resolve_params(resource, profile)
            ]
            classes.append(render_pydantic_class(params_class, "Named params profile.", members))

        return classes

    def _helpers(self, name: str) -> str:
        return dedent(f'''
            def _negotiate(request: Request) -> str:
                """Pick the response format from ``?format=``, defaulting to DEFAULT_FORMAT."""
                fmt = request.query_params.get("format", DEFAULT_FORMAT)
                if fmt not in RESPONSE_FORMATS:
                    raise HTTPException(status_code=406, detail=f"Unsupported format: {{fmt}}")
                return fmt


            def _respond(fmt: str, payload: Any, status_code: int = 200) -> Response:
                """Encode ``payload`` in the negotiated format."""
                content = jsonable_encoder(payload)
                if fmt == "json":
                    return JSONResponse(content=content, status_code=status_code)
                if fmt == "html":
                    body = html.escape(json.dumps(content, indent=2))
                    return HTMLResponse(content=f"<pre>{{body}}</pre>", status_code=status_code)
                return Response(
                    content=json.dumps(content),
                    media_type=f"application/{{fmt}}",
                    status_code=status_code,
                )


            def _envelope(record_id: int, item: _Model) -> dict[str, Any]:
                return {{**jsonable_encoder(item), "id": record_id}}


            def _get_or_404(record_id: int) -> _Model:
                item = _records.get(record_id)
                if item is None:
                    raise HTTPException(status_code=404, detail="{name} not found")
                return item
        ''').strip()

    # Handlers

    def _auto_crud_handlers(self, resource: ir.ResourceSpec) -> list[str]:
        name = resource.name
        cls = class_name(name)
        snake = snake_case(name)
        plural = pluralize(snake)
        async_prefix = "async " if self.config.async_handlers else ""

        content = dedent(f'''
            @router.get("")
            {async_prefix}def list_{plural}(request: Request) -> Response:
                """List all {name} records."""
                fmt = _negotiate(request)
                return _respond(fmt, [_envelope(record_id, item) for record_id, item in _records.items()])


            @router.get("/{{id}}")
            {async_prefix}def show_{snake}(id: int, request: Request) -> Response:
                """Get a {name} by ID."""
                fmt = _negotiate(request)
                return _respond(fmt, _envelope(id, _get_or_404(id)))


            @router.post("", status_code=201)
            {async_prefix}def create_{snake}(params: {cls}Params, request: Request) -> Response:
                """Create a new {name}."""
                fmt = _negotiate(request)
                try:
                    item = _Model.model_validate(params.model_dump(exclude_unset=True))
                except ValidationError as exc:
                    raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
                record_id = next(_ids)
                _records[record_id] = item
                return _respond(fmt, _envelope(record_id, item), status_code=201)


            @router.patch("/{{id}}")
            {async_prefix}def update_{snake}(id: int, params: {cls}UpdateParams, request: Request) -> Response:
                """Update a {name}."""
                fmt = _negotiate(request)
                current = _get_or_404(id)
                try:
                    item = _Model.model_validate(
                        {{**dict(current), **params.model_dump(exclude_unset=True)}}
                    )
                except ValidationError as exc:
                    raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
                _records[id] = item
                return _respond(fmt, _envelope(id, item))


            @router.delete("/{{id}}", status_code=204)
            {async_prefix}def delete_{snake}(id: int, request: Request) -> Response:
                """Delete a {name}."""
                _negotiate(request)
                _get_or_404(id)
                del _records[id]
                return Response(status_code=204)
        ''').strip()

        return [content]

    def _manual_handlers(
        self,
        resource: ir.ResourceSpec,
        controller: ir.ControllerSpec,
        actions: list[ir.ActionSpec],
        result: GenerationResult,
    ) -> list[str]:
        name = resource.name
        snake = snake_case(name)
        async_prefix = "async " if self.config.async_handlers else ""

        handlers: list[str] = []
        seen: set[str] = set()
        for action in actions:
            if action.name in seen:
                result.add_warning(
                    f"Resource '{name}': action '{action.name}' is declared more than once"
                )
            seen.add(action.name)

            method, suffix, takes_id = CONVENTIONAL_ACTIONS.get(
                action.name, ("post", f"/{action.name}", False)
            )
            subject = pluralize(snake) if action.name in ("list", "index") else snake

            args = []
            if takes_id:
                args.append("id: int")
            profile = controller.get_named_profile(action.name)
            if profile is not None:
                args.append(f"params: {profile_class_name(class_name(name), profile.name)}")
            args.append("request: Request")

            lines = [
                f'@router.{method}("{suffix}")',
                f"{async_prefix}def {action.name}_{subject}({', '.join(args)}):",
                f'    """{action.name} action."""',
            ]
            if action.body and action.body.strip():
                lines.extend(indent_block(action.body))
            else:
                lines.append("    pass")
            handlers.append("\n".join(lines))

        return handlers
