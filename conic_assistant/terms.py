from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import reduce
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

_COEFFICIENT = r"(?P<coef>[+-]?[\d.]*)\*?"

# Most specific shape first so `x^2y^2` is never read as a bare `x`.
TERM_SHAPES: Tuple[Tuple[Tuple[int, int], Pattern[str]], ...] = (
    ((2, 2), re.compile(_COEFFICIENT + r"x\^?2\*?y\^?2")),
    ((2, 1), re.compile(_COEFFICIENT + r"x\^?2\*?y(?!\^)")),
    ((1, 2), re.compile(_COEFFICIENT + r"x\*?y\^?2")),
    ((2, 0), re.compile(_COEFFICIENT + r"x\^?2")),
    ((0, 2), re.compile(_COEFFICIENT + r"y\^?2")),
    ((1, 1), re.compile(_COEFFICIENT + r"(?:x\*?y|y\*?x)(?!\^)")),
    ((1, 0), re.compile(_COEFFICIENT + r"x(?![\^y])")),
    ((0, 1), re.compile(_COEFFICIENT + r"y(?!\^)")),
    ((0, 0), re.compile(r"(?P<coef>[+-]?[\d.]+)")),
)

TERM_LABELS: Dict[Tuple[int, int], str] = {
    (2, 2): "x^2y^2",
    (2, 1): "x^2y",
    (1, 2): "xy^2",
    (2, 0): "x^2",
    (0, 2): "y^2",
    (1, 1): "xy",
    (1, 0): "x",
    (0, 1): "y",
    (0, 0): "const",
}

_SLOTS: Dict[Tuple[int, int], str] = {
    (2, 0): "A",
    (1, 1): "B",
    (0, 2): "C",
    (1, 0): "D",
    (0, 1): "E",
    (0, 0): "F",
}

# Split before a sign that starts a new additive term, not one inside an
# exponent, a product or a quotient.
_TERM_BOUNDARY = re.compile(r"(?<=[^\^*/(])(?=[+-])")


@dataclass(frozen=True)
class Term:
    coefficient: float
    x_degree: int
    y_degree: int

    @property
    def degrees(self) -> Tuple[int, int]:
        return self.x_degree, self.y_degree

    def negated(self) -> "Term":
        return Term(-self.coefficient, self.x_degree, self.y_degree)


@dataclass(frozen=True)
class CoefficientVector:
    A: float = 0.0
    B: float = 0.0
    C: float = 0.0
    D: float = 0.0
    E: float = 0.0
    F: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {"A": self.A, "B": self.B, "C": self.C, "D": self.D, "E": self.E, "F": self.F}

    def scaled(self, factor: float) -> "CoefficientVector":
        return CoefficientVector(**{name: value * factor for name, value in self.as_dict().items()})

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(value) for value in self.as_dict().values())

    @property
    def discriminant(self) -> float:
        return self.B * self.B - 4 * self.A * self.C


@dataclass(frozen=True)
class SideScan:
    terms: Tuple[Term, ...]
    skipped: Tuple[str, ...]

    @property
    def complete(self) -> bool:
        return not self.skipped


def parse_coefficient(text: str) -> float:
    if text in ("", "+"):
        return 1.0
    if text == "-":
        return -1.0
    try:
        return float(text)
    except ValueError:
        return 1.0


def split_terms(side: str) -> List[str]:
    return [chunk for chunk in _TERM_BOUNDARY.split(side) if chunk]


def _match_chunk(chunk: str) -> Optional[Term]:
    for (x_degree, y_degree), pattern in TERM_SHAPES:
        match = pattern.fullmatch(chunk)
        if match is None:
            continue
        text = match.group("coef")
        if (x_degree, y_degree) == (0, 0):
            try:
                return Term(float(text), 0, 0)
            except ValueError:
                return None
        return Term(parse_coefficient(text), x_degree, y_degree)
    return None


def scan_side(side: str) -> SideScan:
    terms: List[Term] = []
    skipped: List[str] = []
    for chunk in split_terms(side):
        term = _match_chunk(chunk)
        if term is None:
            skipped.append(chunk)
        else:
            terms.append(term)
    return SideScan(terms=tuple(terms), skipped=tuple(skipped))


def extract_terms(side: str) -> Tuple[Term, ...]:
    return scan_side(side).terms


def scan_equation(left: str, right: str) -> SideScan:
    """Scan both sides; right-hand terms come back with their sign flipped."""
    left_scan = scan_side(left)
    right_scan = scan_side(right)
    return SideScan(
        terms=left_scan.terms + tuple(term.negated() for term in right_scan.terms),
        skipped=left_scan.skipped + right_scan.skipped,
    )


def _add_term(coeffs: CoefficientVector, term: Term) -> CoefficientVector:
    slot = _SLOTS.get(term.degrees)
    if slot is None:
        return coeffs
    values = coeffs.as_dict()
    values[slot] += term.coefficient
    return CoefficientVector(**values)


def combine_terms(terms: Iterable[Term]) -> CoefficientVector:
    return reduce(_add_term, terms, CoefficientVector())


def combine_term_table(terms: Iterable[Term]) -> Dict[str, float]:
    table = {label: 0.0 for label in TERM_LABELS.values()}
    for term in terms:
        label = TERM_LABELS.get(term.degrees)
        if label is not None:
            table[label] += term.coefficient
    return table
