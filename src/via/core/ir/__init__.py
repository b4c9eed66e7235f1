"""
Via Intermediate Representation (IR) types.

The IR is the AST produced by the parser. It is immutable once built, is
consumed by the code generator and is serialized as the IR snapshot.

All types are re-exported from this package.
"""

from .controllers import (
    ActionSpec,
    AutoCrud,
    ControllerActions,
    ControllerSpec,
    EditableParams,
    ManualActions,
    NamedParams,
    ParamEntry,
    ParamsKind,
    ParamsProfile,
)
from .fields import (
    FieldAttributes,
    FieldSpec,
    ModelSpec,
    TypeRef,
)
from .resources import ResourceSpec
from .snapshot import dump_ir, load_ir

__all__ = [
    # Fields
    "FieldAttributes",
    "FieldSpec",
    "ModelSpec",
    "TypeRef",
    # Controllers
    "ActionSpec",
    "AutoCrud",
    "ControllerActions",
    "ControllerSpec",
    "EditableParams",
    "ManualActions",
    "NamedParams",
    "ParamEntry",
    "ParamsKind",
    "ParamsProfile",
    # Resources
    "ResourceSpec",
    # Snapshot
    "dump_ir",
    "load_ir",
]
