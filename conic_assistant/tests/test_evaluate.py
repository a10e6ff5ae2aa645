from __future__ import annotations

import json
from pathlib import Path

import httpx

from conic_assistant.evaluate import evaluate_entry, load_dataset, main, summarize


def _write_dataset(path: Path, entries: list) -> None:
    path.write_text("\n".join(json.dumps(entry) for entry in entries) + "\n\n", encoding="utf-8")


def test_load_dataset_skips_blank_lines(tmp_path: Path) -> None:
    dataset = tmp_path / "conics.jsonl"
    _write_dataset(dataset, [{"equation": "y = x^2"}, {"equation": "qwerty"}])
    assert [entry["equation"] for entry in load_dataset(str(dataset))] == ["y = x^2", "qwerty"]


def test_evaluate_entry_locally() -> None:
    passed = evaluate_entry(
        {"id": "c1", "equation": "(x-2)^2 + (y-3)^2 = 16", "expected_type": "circonferenza",
         "expected_center": {"x": 2, "y": 3}, "min_confidence": 0.8}
    )
    assert passed["passed"]
    failed = evaluate_entry({"id": "c2", "equation": "qwerty", "expected_type": "parabola"})
    assert not failed["passed"]
    assert failed["failures"][0]["check"] == "type"


def test_evaluate_entry_against_service() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert body == {"equation": "y = x^2", "useAI": False}
        return httpx.Response(200, json={"type": "parabola", "confidence": 0.95, "parameters": {}})

    client = httpx.Client(base_url="http://conic.test", transport=httpx.MockTransport(handler))
    result = evaluate_entry({"equation": "y = x^2", "expected_type": "parabola"}, client)
    assert result["passed"]


def test_summarize_counts_failure_reasons() -> None:
    summary = summarize(
        [
            {"passed": True, "failures": []},
            {"passed": False, "failures": [{"check": "type"}]},
            {"passed": False, "failures": [{"check": "type"}, {"check": "center"}]},
        ]
    )
    assert summary == {"total": 3, "passed": 1, "failed": 2, "failure_reasons": {"type": 2, "center": 1}}


def test_main_writes_summary(tmp_path: Path) -> None:
    dataset = tmp_path / "conics.jsonl"
    out = tmp_path / "summary.json"
    _write_dataset(
        dataset,
        [
            {"equation": "x^2/25 + y^2/16 = 1", "expected_type": "ellisse"},
            {"equation": "x^2/16 - y^2/9 = 1", "expected_type": "iperbole"},
        ],
    )
    assert main(["--dataset", str(dataset), "--out", str(out)]) == 0
    report = json.loads(out.read_text(encoding="utf-8"))
    assert report["summary"]["passed"] == 2
