from __future__ import annotations

from typing import List

from markupgen.core.generation.code_model import CompileUnit
from markupgen.core.generation.models import TransformContext


class Transformer:
    """
    Unit of generation customization.

    All three hooks are no-ops here; subclasses override the ones they need.
    ``mutate_model`` receives the pass's model by reference and returns the
    model the next transformer should see (normally the same object).
    """

    name: str = "transformer"

    def initialize(self, context: TransformContext) -> None:
        return None

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        return model

    def mutate_text(self, text: str) -> str:
        return text

    def names(self) -> List[str]:
        return [self.name]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
