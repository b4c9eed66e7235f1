"""
Via code generation.

``generate`` is a pure function from parsed resources to generated artifacts:
no I/O, and identical input always yields byte-identical output. Artifacts
are grouped by kind (models, controllers, package scaffolding, client
types); within a kind resources keep their input order and the kind's index
file comes last.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from via.config import CodegenConfig
from via.core import ir

from .base import Generator
from .controllers import ControllerGenerator
from .models import ModelGenerator
from .package import PackageGenerator
from .result import GeneratedFile, GenerationResult
from .types import TypeGenerator

logger = logging.getLogger(__name__)

GENERATORS: list[type[Generator]] = [
    ModelGenerator,
    ControllerGenerator,
    PackageGenerator,
    TypeGenerator,
]


def generate(
    resources: Sequence[ir.ResourceSpec],
    config: CodegenConfig | None = None,
) -> GenerationResult:
    """
    Generate every artifact for ``resources``.

    Args:
        resources: Parsed resources in aggregate order
        config: Code generation options (defaults when omitted)

    Returns:
        GenerationResult with files in emission order and any warnings
    """
    config = config or CodegenConfig()
    result = GenerationResult()

    for warning in _duplicate_warnings(resources):
        result.add_warning(warning)

    for generator_cls in GENERATORS:
        result.merge(generator_cls(resources, config).generate())

    for warning in result.warnings:
        logger.warning(warning)
    logger.info("Generated %d file(s) for %d resource(s)", len(result.files), len(resources))
    return result


def _duplicate_warnings(resources: Sequence[ir.ResourceSpec]) -> list[str]:
    warnings: list[str] = []

    origins: dict[str, list[str]] = {}
    for resource in resources:
        origins.setdefault(resource.name, []).append(resource.file_path)
    for name, paths in origins.items():
        if len(paths) > 1:
            warnings.append(
                f"Resource '{name}' is declared {len(paths)} times ({', '.join(paths)}); "
                "the last declaration's files overwrite the earlier ones"
            )

    for resource in resources:
        if resource.model is None:
            continue
        for field_name in resource.model.duplicate_field_names:
            warnings.append(
                f"Resource '{resource.name}' declares field '{field_name}' more than once; "
                "the last declaration is used"
            )

    return warnings


__all__ = [
    "GENERATORS",
    "GeneratedFile",
    "GenerationResult",
    "Generator",
    "generate",
]
