"""
Base generator class.

Each generator owns one artifact kind (models, controllers, client types,
package scaffolding). It renders one artifact per resource in input order,
then the kind's aggregate files, so every kind's output is contiguous and
its aggregate comes last.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from via.config import CodegenConfig
from via.core import ir

from .result import GenerationResult


class Generator(ABC):
    """
    Base class for all generators.

    Example:
        class ModelGenerator(Generator):
            def generate_resource(self, resource: ir.ResourceSpec) -> GenerationResult:
                result = GenerationResult()
                result.add_file(f"src/models/{module_name(resource.name)}.py", ...)
                return result
    """

    def __init__(self, resources: Sequence[ir.ResourceSpec], config: CodegenConfig):
        """
        Initialize generator.

        Args:
            resources: Parsed resources in aggregate order
            config: Code generation options
        """
        self.resources = list(resources)
        self.config = config

    def generate(self) -> GenerationResult:
        """Generate every artifact of this kind."""
        result = GenerationResult()
        for resource in self.resources:
            result.merge(self.generate_resource(resource))
        result.merge(self.generate_aggregate(self.unique_resources()))
        return result

    @abstractmethod
    def generate_resource(self, resource: ir.ResourceSpec) -> GenerationResult:
        """Generate the artifact(s) for a single resource."""

    def generate_aggregate(self, resources: list[ir.ResourceSpec]) -> GenerationResult:
        """Generate files that index all resources. Nothing by default."""
        return GenerationResult()

    def unique_resources(self) -> list[ir.ResourceSpec]:
        """Resources with duplicate names collapsed to their first occurrence."""
        seen: set[str] = set()
        unique: list[ir.ResourceSpec] = []
        for resource in self.resources:
            if resource.name not in seen:
                seen.add(resource.name)
                unique.append(resource)
        return unique
