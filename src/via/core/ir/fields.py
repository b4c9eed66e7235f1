"""
Model and field types for Via IR.

This module contains the type references, field attributes and field
specifications that make up a resource's model section.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TypeRef(BaseModel):
    """
    Reference to a field type as written in source.

    Examples:
        - String: TypeRef(name="String")
        - String?: TypeRef(name="String", optional=True)
    """

    name: str
    optional: bool = False

    model_config = ConfigDict(frozen=True)


class FieldAttributes(BaseModel):
    """
    Attributes attached to a field with ``@`` directives.

    Attributes:
        serialize: None when no directive was given (include by default),
            False to omit the field from serialized/client-visible output,
            True for an explicit include.
    """

    serialize: bool | None = None

    model_config = ConfigDict(frozen=True)


class FieldSpec(BaseModel):
    """
    Specification for a single field in a resource model.

    Attributes:
        name: Field identifier
        ty: Declared type
        optional: True if either the name or the type carried ``?``
        attributes: Field directives
    """

    name: str
    ty: TypeRef
    optional: bool = False
    attributes: FieldAttributes = Field(default_factory=FieldAttributes)

    model_config = ConfigDict(frozen=True)

    @property
    def is_serialized(self) -> bool:
        """Check if field appears in serialized and client-facing output."""
        return self.attributes.serialize is not False


class ModelSpec(BaseModel):
    """
    Model section of a resource.

    Field order is significant and preserved exactly as declared.
    """

    fields: list[FieldSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def get_field(self, name: str) -> FieldSpec | None:
        """Get the field with the given name; a repeated name resolves to its last declaration."""
        for field in reversed(self.fields):
            if field.name == name:
                return field
        return None

    @property
    def duplicate_field_names(self) -> list[str]:
        """Field names declared more than once, in first-repeat order."""
        seen: set[str] = set()
        duplicates: list[str] = []
        for field in self.fields:
            if field.name in seen and field.name not in duplicates:
                duplicates.append(field.name)
            seen.add(field.name)
        return duplicates
