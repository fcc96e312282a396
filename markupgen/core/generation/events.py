from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from .models import Diagnostic


DiagnosticCallback = Callable[[int, str, int, int], None]
ProgressCallback = Callable[[int, int], None]


@dataclass
class GenerationEvents:
    """
    Records the notifications of one or more generation passes.

    Pass ``events.on_diagnostic`` / ``events.on_progress`` to the
    orchestrator. ``timeline`` keeps both channels in emission order.
    """

    diagnostics: List[Diagnostic] = field(default_factory=list)
    progress: List[Tuple[int, int]] = field(default_factory=list)
    timeline: List[Tuple[str, Any]] = field(default_factory=list)

    def on_diagnostic(self, code: int, message: str, line: int, column: int) -> None:
        d = Diagnostic(code=code, message=message, line=line, column=column)
        self.diagnostics.append(d)
        self.timeline.append(("diagnostic", d))

    def on_progress(self, completed: int, total: int) -> None:
        self.progress.append((completed, total))
        self.timeline.append(("progress", (completed, total)))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "diagnostics": [
                {"code": d.code, "message": d.message, "line": d.line, "column": d.column}
                for d in self.diagnostics
            ],
            "progress": [{"completed": c, "total": t} for c, t in self.progress],
        }
