"""
Controller types for Via IR.

This module contains params profiles, the action set of a controller and
the controller specification itself. ``ControllerActions`` and
``ParamsKind`` are closed unions discriminated by ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ParamEntry(BaseModel):
    """One whitelisted field in a params profile."""

    name: str
    optional: bool = False

    model_config = ConfigDict(frozen=True)


class EditableParams(BaseModel):
    """The conventional create/update whitelist (``editable``)."""

    kind: Literal["editable"] = "editable"

    model_config = ConfigDict(frozen=True)


class NamedParams(BaseModel):
    """An arbitrary profile name referenced by generated action code."""

    kind: Literal["named"] = "named"
    name: str

    model_config = ConfigDict(frozen=True)


ParamsKind = Annotated[EditableParams | NamedParams, Field(discriminator="kind")]


class ParamsProfile(BaseModel):
    """
    Named whitelist of fields an action may accept as input.

    Examples:
        - editable [title, body?]: ParamsProfile(name=EditableParams(), entries=[...])
        - publish published_at: ParamsProfile(name=NamedParams(name="publish"), entries=[...])
    """

    name: ParamsKind
    entries: list[ParamEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def is_editable(self) -> bool:
        return isinstance(self.name, EditableParams)


class ActionSpec(BaseModel):
    """A manually declared controller action with optional verbatim body."""

    name: str
    body: str | None = None

    model_config = ConfigDict(frozen=True)


class AutoCrud(BaseModel):
    """Standard list/show/create/update/delete action set."""

    kind: Literal["auto_crud"] = "auto_crud"

    model_config = ConfigDict(frozen=True)


class ManualActions(BaseModel):
    """Exactly the declared actions, in declaration order."""

    kind: Literal["manual"] = "manual"
    actions: list[ActionSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


ControllerActions = Annotated[AutoCrud | ManualActions, Field(discriminator="kind")]


class ControllerSpec(BaseModel):
    """
    Controller section of a resource.

    Attributes:
        params: Params profiles in declaration order
        respond_with: Response format names; the first is the default
        actions: AutoCrud unless actions were declared explicitly
    """

    params: list[ParamsProfile] = Field(default_factory=list)
    respond_with: list[str] = Field(default_factory=list)
    actions: ControllerActions = Field(default_factory=AutoCrud)

    model_config = ConfigDict(frozen=True)

    @property
    def editable_profile(self) -> ParamsProfile | None:
        """The first ``editable`` profile, if declared."""
        return next((p for p in self.params if p.is_editable), None)

    @property
    def named_profiles(self) -> list[ParamsProfile]:
        return [p for p in self.params if not p.is_editable]

    def get_named_profile(self, name: str) -> ParamsProfile | None:
        """Get the first named profile called ``name``."""
        for profile in self.named_profiles:
            if isinstance(profile.name, NamedParams) and profile.name.name == name:
                return profile
        return None
