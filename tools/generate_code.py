from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Dict, List, Optional

# ---- sys.path bootstrap (Windows-friendly) ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ---------------------------------------------

from markupgen.core.generation.models import GenerationRequest, UnknownLanguageError  # noqa: E402
from markupgen.core.generation.service import run_generation  # noqa: E402
from markupgen.core.generation.source_reader import UnknownEncodingError  # noqa: E402
from markupgen.core.settings import GeneratorSettings  # noqa: E402
from markupgen.core.transformers.profiles import UnknownProfileError  # noqa: E402


def _parse_directives(pairs: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for raw in pairs:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Directive must look like key=value, got {raw!r}")
        out[key.strip()] = value.strip()
    return out


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Generate source code from a markup template")
    ap.add_argument("template", help="Template file (.cshtml / .vbhtml)")
    ap.add_argument("--relative-path", default=None, help="Project-relative path used for the type name (default: file name)")
    ap.add_argument("--language", default=None, help="Target language (default: from the file extension)")
    ap.add_argument("--profile", default="webpage", help="Transformer profile (default: webpage)")
    ap.add_argument("-D", "--directive", action="append", default=[], help="Directive as key=value (repeatable)")
    ap.add_argument("--output", default=None, help="Write code to this file instead of stdout")
    args = ap.parse_args(argv)

    settings = GeneratorSettings.from_env()
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    template = Path(args.template)
    try:
        directives = _parse_directives(args.directive)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    request = GenerationRequest(
        source_path=str(template),
        project_relative_path=args.relative_path or template.name,
        language=args.language,
        directives=directives,
    )

    try:
        result, events = run_generation(request, profile=args.profile, settings=settings)
    except (UnknownProfileError, UnknownLanguageError, UnknownEncodingError) as e:
        print(f"ERROR: {e.args[0]}", file=sys.stderr)
        return 2

    for d in events.diagnostics:
        print(f"{template}({d.line},{d.column}): error MG{d.code:04d}: {d.message}", file=sys.stderr)

    if not result.ok:
        print(f"ERROR: generation failed during {result.failure.stage}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(result.code, encoding="utf-8")
    else:
        sys.stdout.write(result.code)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
