from .base import Transformer
from .chain import TransformChain
from .catalog import (
    AddGeneratedCodeAttribute,
    AddMarkerAttribute,
    DirectiveDispatch,
    ExcludeFromCodeCoverage,
    MakePartialAndStripDefaultConstructor,
    ReplaceText,
    RewriteLinePragmas,
    SetBaseType,
    SetImports,
    SetNamespace,
)
from .directives import STANDARD_DIRECTIVES
from .profiles import TransformerProfileRegistry, UnknownProfileError

__all__ = [
    "Transformer",
    "TransformChain",
    "AddGeneratedCodeAttribute",
    "AddMarkerAttribute",
    "DirectiveDispatch",
    "ExcludeFromCodeCoverage",
    "MakePartialAndStripDefaultConstructor",
    "ReplaceText",
    "RewriteLinePragmas",
    "SetBaseType",
    "SetImports",
    "SetNamespace",
    "STANDARD_DIRECTIVES",
    "TransformerProfileRegistry",
    "UnknownProfileError",
]
