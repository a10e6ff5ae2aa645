from __future__ import annotations

import argparse
import json
import math
from collections import Counter
from typing import Any, Dict, List, Optional

import httpx

from .config import configure_logging, load_settings
from .strategies import parse_conic

CENTER_TOLERANCE = 1e-2


def load_dataset(path: str) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            records.append(json.loads(line))
    return records


def classify_locally(equation: str) -> Dict[str, Any]:
    result = parse_conic(equation, samples=0)
    return result.model_dump(by_alias=True, mode="json", exclude_none=True)


def classify_remotely(equation: str, client: httpx.Client) -> Dict[str, Any]:
    response = client.post("/conic/parse", json={"equation": equation, "useAI": False})
    response.raise_for_status()
    return response.json()


def evaluate_entry(entry: Dict[str, Any], client: Optional[httpx.Client] = None) -> Dict[str, Any]:
    equation = entry["equation"]
    if client is None:
        payload = classify_locally(equation)
    else:
        payload = classify_remotely(equation, client)
    failures = []
    expected_type = entry.get("expected_type")
    if expected_type and payload.get("type") != expected_type:
        failures.append({"check": "type", "reason": f"expected {expected_type}, got {payload.get('type')}"})
    expected_center = entry.get("expected_center")
    if expected_center:
        center = payload.get("parameters", {}).get("center")
        if center is None:
            failures.append({"check": "center", "reason": "missing"})
        elif not all(
            math.isclose(center[axis], expected_center[axis], abs_tol=CENTER_TOLERANCE) for axis in ("x", "y")
        ):
            failures.append({"check": "center", "reason": "mismatch"})
    min_confidence = entry.get("min_confidence")
    if min_confidence is not None and payload.get("confidence", 0.0) < min_confidence:
        failures.append({"check": "confidence", "reason": f"below {min_confidence}"})
    return {
        "id": entry.get("id"),
        "equation": equation,
        "type": payload.get("type"),
        "confidence": payload.get("confidence"),
        "passed": len(failures) == 0,
        "failures": failures,
    }


def summarize(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    failures: Counter = Counter()
    for result in results:
        if not result["passed"]:
            failures.update({f["check"]: 1 for f in result["failures"]})
    return {
        "total": len(results),
        "passed": sum(1 for r in results if r["passed"]),
        "failed": sum(1 for r in results if not r["passed"]),
        "failure_reasons": dict(failures),
    }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate the conic classifier on a JSONL dataset.")
    parser.add_argument("--dataset", required=True, help="Path to JSONL dataset.")
    parser.add_argument("--base-url", default="", help="Query a running service instead of the local parser.")
    parser.add_argument("--limit", type=int, default=0, help="Limit entries.")
    parser.add_argument("--out", default="-", help="Output JSON summary path.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(load_settings().log_level)
    records = load_dataset(args.dataset)
    if args.limit > 0:
        records = records[: args.limit]
    client = httpx.Client(base_url=args.base_url, timeout=30.0) if args.base_url else None
    try:
        results = [evaluate_entry(entry, client) for entry in records]
    finally:
        if client is not None:
            client.close()
    output = json.dumps({"summary": summarize(results), "results": results}, indent=2)
    if args.out in ("-", "", None):
        print(output)
    else:
        with open(args.out, "w", encoding="utf-8") as handle:
            handle.write(output)
    return 0 if all(r["passed"] for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
