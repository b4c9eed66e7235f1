"""
Resource types for Via IR.

A resource is the top-level declared unit: an optional model, an optional
controller and the path of the file it was parsed from.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .controllers import ControllerSpec
from .fields import FieldSpec, ModelSpec


class ResourceSpec(BaseModel):
    """
    Specification for a single resource.

    Attributes:
        name: Resource identifier (PascalCase by convention)
        model: Model section, if declared
        controller: Controller section, if declared
        file_path: Originating source file, for diagnostics and traceability
    """

    name: str
    model: ModelSpec | None = None
    controller: ControllerSpec | None = None
    file_path: str

    model_config = ConfigDict(frozen=True)

    @property
    def fields(self) -> list[FieldSpec]:
        """Model fields, or an empty list when no model was declared."""
        return list(self.model.fields) if self.model else []
