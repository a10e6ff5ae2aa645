#!/usr/bin/env python3
"""
Conic classifier bridge.
Reads JSON from stdin and writes JSON to stdout.
"""

import json
import sys

from conic_assistant.display import format_parameters_for_display
from conic_assistant.polynomial import analyze_polynomial
from conic_assistant.strategies import parse_conic


def main() -> None:
    try:
        payload = json.loads(sys.stdin.read() or "{}")
    except json.JSONDecodeError:
        sys.stdout.write(json.dumps({"ok": False, "reason": "bad_payload"}))
        return

    equation = payload.get("equation")
    if not isinstance(equation, str) or not equation.strip():
        sys.stdout.write(json.dumps({"ok": False, "reason": "missing_equation"}))
        return

    mode = str(payload.get("mode", "parse")).lower()
    if mode == "polynomial":
        analysis = analyze_polynomial(equation)
        sys.stdout.write(
            json.dumps(
                {
                    "ok": analysis.error is None,
                    "kind": "polynomial",
                    "result": analysis.model_dump(by_alias=True, mode="json", exclude_none=True),
                }
            )
        )
        return

    try:
        samples = int(payload.get("samples", 100))
    except (TypeError, ValueError):
        sys.stdout.write(json.dumps({"ok": False, "reason": "bad_samples"}))
        return
    result = parse_conic(equation, samples=samples)
    sys.stdout.write(
        json.dumps(
            {
                "ok": True,
                "kind": "parse",
                "result": result.model_dump(by_alias=True, mode="json", exclude_none=True),
                "rows": [row.model_dump(mode="json") for row in format_parameters_for_display(result)],
            }
        )
    )


if __name__ == "__main__":
    main()
