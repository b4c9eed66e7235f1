"""
Package scaffolding generation.

Generates ``src/__init__.py`` and ``src/app.py`` so the generated sources
form an importable package with a ready FastAPI application.
"""

from __future__ import annotations

from textwrap import dedent

from via.core import ir

from .base import Generator
from .result import GenerationResult
from .utils import GENERATED_NOTICE


class PackageGenerator(Generator):
    """Generates the package marker and application factory."""

    def generate_resource(self, resource: ir.ResourceSpec) -> GenerationResult:
        return GenerationResult()

    def generate_aggregate(self, resources: list[ir.ResourceSpec]) -> GenerationResult:
        result = GenerationResult()

        result.add_file(
            "src/__init__.py",
            f'"""\nGenerated application package.\n{GENERATED_NOTICE}\n"""\n',
        )

        app = dedent(f'''
            """
            Application factory.
            {GENERATED_NOTICE}
            """
            from fastapi import FastAPI

            from .controllers import routers


            def create_app() -> FastAPI:
                """Create the FastAPI application with every resource router."""
                app = FastAPI(title="Via application")
                for router in routers:
                    app.include_router(router)
                return app


            app = create_app()
        ''').lstrip()
        result.add_file("src/app.py", app)
        return result
