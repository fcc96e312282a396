from __future__ import annotations

from typing import Iterable, List, Tuple

from markupgen.core.generation.code_model import CompileUnit
from markupgen.core.generation.models import TransformContext

from .base import Transformer


class TransformChain(Transformer):
    """
    Ordered composite of transformers, usable wherever a single one is.

    Member order is fixed at construction and is part of the chain's
    behavior: initialize and mutate_model run members front to back, and
    mutate_text feeds each member's output into the next member.
    """

    name = "chain"

    def __init__(self, transformers: Iterable[Transformer] = ()):
        self._members: Tuple[Transformer, ...] = tuple(transformers)

    @property
    def members(self) -> Tuple[Transformer, ...]:
        return self._members

    def initialize(self, context: TransformContext) -> None:
        for t in self._members:
            t.initialize(context)

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        for t in self._members:
            model = t.mutate_model(model)
        return model

    def mutate_text(self, text: str) -> str:
        for t in self._members:
            text = t.mutate_text(text)
        return text

    def names(self) -> List[str]:
        out: List[str] = []
        for t in self._members:
            out.extend(t.names())
        return out

    def __len__(self) -> int:
        return len(self._members)
