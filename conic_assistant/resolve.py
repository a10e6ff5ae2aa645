from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from .classify import EPSILON, classify, is_zero, nearly_equal, refine_type
from .schemas import Coefficients, ConicParameters, ConicType, Point
from .terms import CoefficientVector

CIRCLE_CONFIDENCE = 0.85
CONIC_CONFIDENCE = 0.85
PARABOLA_CONFIDENCE = 0.95
HORIZONTAL_PARABOLA_CONFIDENCE = 0.9
ROTATED_CONFIDENCE = 0.8


@dataclass(frozen=True)
class Resolution:
    conic_type: ConicType
    parameters: ConicParameters
    standard_form: str
    explanation: str
    confidence: float

    def with_confidence(self, confidence: float) -> "Resolution":
        return replace(self, confidence=round(min(1.0, max(0.0, confidence)), 4))


def format_number(value: float) -> str:
    rounded = round(value, 4)
    if rounded == 0:
        return "0"
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.4f}".rstrip("0").rstrip(".")


def _display(value: float) -> str:
    return f"{round(value, 2) + 0.0:.2f}"


def _point(x: float, y: float) -> Point:
    return Point(x=float(x) + 0.0, y=float(y) + 0.0)


def squared_term(variable: str, shift: float) -> str:
    if is_zero(round(shift, 4)):
        return f"{variable}²"
    sign = "-" if shift > 0 else "+"
    return f"({variable}{sign}{format_number(abs(shift))})²"


def _scaled_variable(value: float, variable: str) -> str:
    if nearly_equal(value, 1.0):
        return variable
    if nearly_equal(value, -1.0):
        return f"-{variable}"
    return f"{format_number(value)}{variable}"


def polynomial_form(dependent: str, variable: str, a: float, b: float, c: float) -> str:
    parts = [_scaled_variable(a, f"{variable}²")]
    for value, suffix in ((b, variable), (c, "")):
        if is_zero(round(value, 4)):
            continue
        sign = "+" if value > 0 else "-"
        magnitude = abs(value)
        body = suffix if suffix and nearly_equal(magnitude, 1.0) else f"{format_number(magnitude)}{suffix}"
        parts.append(f"{sign} {body}")
    return f"{dependent} = " + " ".join(parts)


def line_through(point: Tuple[float, float], direction: Tuple[float, float]) -> str:
    x0, y0 = point
    dx, dy = direction
    if abs(dx) < 1e-9:
        return f"x = {format_number(x0)}"
    slope = dy / dx
    intercept = y0 - slope * x0
    if is_zero(round(slope, 4)):
        return f"y = {format_number(intercept)}"
    text = f"y = {_scaled_variable(slope, 'x')}"
    if not is_zero(round(intercept, 4)):
        sign = "+" if intercept > 0 else "-"
        text += f" {sign} {format_number(abs(intercept))}"
    return text


def circle_resolution(
    h: float,
    k: float,
    radius_squared: float,
    confidence: float = CIRCLE_CONFIDENCE,
) -> Optional[Resolution]:
    if radius_squared <= EPSILON:
        return None
    radius = math.sqrt(radius_squared)
    return Resolution(
        conic_type=ConicType.CIRCLE,
        parameters=ConicParameters(center=_point(h, k), radius=radius, eccentricity=0.0),
        standard_form=f"{squared_term('x', h)} + {squared_term('y', k)} = {format_number(radius_squared)}",
        explanation=(
            f"Riconosciuta come circonferenza con centro ({_display(h)}, {_display(k)}) "
            f"e raggio {_display(radius)}"
        ),
        confidence=confidence,
    )


def ellipse_resolution(
    h: float,
    k: float,
    a_squared: float,
    b_squared: float,
    confidence: float = CONIC_CONFIDENCE,
) -> Optional[Resolution]:
    """Axis-aligned ellipse; `a_squared` lies along x, `b_squared` along y."""
    if a_squared <= EPSILON or b_squared <= EPSILON:
        return None
    if nearly_equal(a_squared, b_squared):
        return circle_resolution(h, k, a_squared, confidence)
    a = math.sqrt(a_squared)
    b = math.sqrt(b_squared)
    major, minor = max(a, b), min(a, b)
    focal = math.sqrt(abs(a_squared - b_squared))
    if a > b:
        focus1, focus2 = _point(h + focal, k), _point(h - focal, k)
    else:
        focus1, focus2 = _point(h, k + focal), _point(h, k - focal)
    return Resolution(
        conic_type=ConicType.ELLIPSE,
        parameters=ConicParameters(
            center=_point(h, k),
            semi_major_axis=major,
            semi_minor_axis=minor,
            focus1=focus1,
            focus2=focus2,
            eccentricity=focal / major,
        ),
        standard_form=(
            f"{squared_term('x', h)}/{format_number(a_squared)} + "
            f"{squared_term('y', k)}/{format_number(b_squared)} = 1"
        ),
        explanation=(
            f"Riconosciuta come ellisse con centro ({_display(h)}, {_display(k)}) "
            f"e semiassi {_display(a)} e {_display(b)}"
        ),
        confidence=confidence,
    )


def hyperbola_resolution(
    h: float,
    k: float,
    a_squared: float,
    b_squared: float,
    vertical: bool = False,
    confidence: float = CONIC_CONFIDENCE,
) -> Optional[Resolution]:
    """`a_squared` belongs to the transverse axis, `b_squared` to the conjugate one."""
    if a_squared <= EPSILON or b_squared <= EPSILON:
        return None
    a = math.sqrt(a_squared)
    b = math.sqrt(b_squared)
    focal = math.sqrt(a_squared + b_squared)
    if vertical:
        focus1, focus2 = _point(h, k + focal), _point(h, k - focal)
        slope = a / b
        standard_form = (
            f"{squared_term('y', k)}/{format_number(a_squared)} - "
            f"{squared_term('x', h)}/{format_number(b_squared)} = 1"
        )
        orientation = "verticale"
    else:
        focus1, focus2 = _point(h + focal, k), _point(h - focal, k)
        slope = b / a
        standard_form = (
            f"{squared_term('x', h)}/{format_number(a_squared)} - "
            f"{squared_term('y', k)}/{format_number(b_squared)} = 1"
        )
        orientation = "orizzontale"
    return Resolution(
        conic_type=ConicType.HYPERBOLA,
        parameters=ConicParameters(
            center=_point(h, k),
            semi_major_axis=a,
            semi_minor_axis=b,
            focus1=focus1,
            focus2=focus2,
            eccentricity=focal / a,
            asymptotes=[line_through((h, k), (1.0, slope)), line_through((h, k), (1.0, -slope))],
        ),
        standard_form=standard_form,
        explanation=(
            f"Riconosciuta come iperbole con asse trasverso {orientation}, "
            f"centro ({_display(h)}, {_display(k)}) e semiassi {_display(a)} e {_display(b)}"
        ),
        confidence=confidence,
    )


def parabola_resolution(
    a: float,
    b: float,
    c: float,
    horizontal: bool = False,
    confidence: Optional[float] = None,
) -> Optional[Resolution]:
    """`y = ax^2 + bx + c`, or `x = ay^2 + by + c` when `horizontal`."""
    if is_zero(a):
        return None
    axis = -b / (2 * a)
    apex = a * axis * axis + b * axis + c
    focal = 1 / (4 * a)
    if horizontal:
        vertex = _point(apex, axis)
        focus = _point(apex + focal, axis)
        directrix = f"x = {format_number(apex - focal)}"
        standard_form = polynomial_form("x", "y", a, b, c)
        default_confidence = HORIZONTAL_PARABOLA_CONFIDENCE
    else:
        vertex = _point(axis, apex)
        focus = _point(axis, apex + focal)
        directrix = f"y = {format_number(apex - focal)}"
        standard_form = polynomial_form("y", "x", a, b, c)
        default_confidence = PARABOLA_CONFIDENCE
    return Resolution(
        conic_type=ConicType.PARABOLA,
        parameters=ConicParameters(
            coefficients=Coefficients(a=a + 0.0, b=b + 0.0, c=c + 0.0),
            vertex=vertex,
            focus1=focus,
            directrix=directrix,
            eccentricity=1.0,
        ),
        standard_form=standard_form,
        explanation=(
            f"Riconosciuta come parabola con a={format_number(a)}, b={format_number(b)}, "
            f"c={format_number(c)}. Vertice: ({_display(vertex.x)}, {_display(vertex.y)})"
        ),
        confidence=default_confidence if confidence is None else confidence,
    )


def _axis_angle(direction: np.ndarray) -> float:
    angle = math.atan2(float(direction[1]), float(direction[0]))
    if angle <= -math.pi / 2:
        angle += math.pi
    elif angle > math.pi / 2:
        angle -= math.pi
    return angle


def rotated_resolution(
    coeffs: CoefficientVector,
    conic_type: ConicType,
    confidence: float = ROTATED_CONFIDENCE,
) -> Optional[Resolution]:
    quadratic = np.array([[coeffs.A, coeffs.B / 2], [coeffs.B / 2, coeffs.C]], dtype=float)
    try:
        center = np.linalg.solve(2 * quadratic, np.array([-coeffs.D, -coeffs.E], dtype=float))
    except np.linalg.LinAlgError:
        return None
    h, k = float(center[0]), float(center[1])
    constant = -(coeffs.F + (coeffs.D * h + coeffs.E * k) / 2)
    if is_zero(constant):
        return None
    eigenvalues, eigenvectors = np.linalg.eigh(quadratic)
    squares = [constant / float(value) for value in eigenvalues]

    if conic_type is ConicType.ELLIPSE:
        if min(squares) <= EPSILON:
            return None
        major_index = int(np.argmax(squares))
        a_squared = squares[major_index]
        b_squared = squares[1 - major_index]
        focal = math.sqrt(a_squared - b_squared)
        eccentricity = focal / math.sqrt(a_squared)
        separator = "+"
        asymptotes: Optional[List[str]] = None
    elif conic_type is ConicType.HYPERBOLA:
        major_index = 0 if squares[0] > 0 else 1
        a_squared = squares[major_index]
        b_squared = -squares[1 - major_index]
        if a_squared <= EPSILON or b_squared <= EPSILON:
            return None
        focal = math.sqrt(a_squared + b_squared)
        eccentricity = focal / math.sqrt(a_squared)
        separator = "-"
        transverse = eigenvectors[:, major_index] * math.sqrt(a_squared)
        conjugate = eigenvectors[:, 1 - major_index] * math.sqrt(b_squared)
        asymptotes = [
            line_through((h, k), (float(transverse[0] + conjugate[0]), float(transverse[1] + conjugate[1]))),
            line_through((h, k), (float(transverse[0] - conjugate[0]), float(transverse[1] - conjugate[1]))),
        ]
    else:
        return None

    direction = eigenvectors[:, major_index]
    angle = _axis_angle(direction)
    offset = direction * focal
    degrees = math.degrees(angle)
    return Resolution(
        conic_type=conic_type,
        parameters=ConicParameters(
            center=_point(h, k),
            semi_major_axis=math.sqrt(a_squared),
            semi_minor_axis=math.sqrt(b_squared),
            focus1=_point(h + offset[0], k + offset[1]),
            focus2=_point(h - offset[0], k - offset[1]),
            eccentricity=eccentricity,
            asymptotes=asymptotes,
            rotation_angle=angle,
        ),
        standard_form=(
            f"X²/{format_number(a_squared)} {separator} Y²/{format_number(b_squared)} = 1 "
            f"(X ruotato di {_display(degrees)}° rispetto all'asse x)"
        ),
        explanation=(
            f"Riconosciuta come {conic_type.value} ruotata di {_display(degrees)}° con centro "
            f"({_display(h)}, {_display(k)}) e semiassi {_display(math.sqrt(a_squared))} "
            f"e {_display(math.sqrt(b_squared))}"
        ),
        confidence=confidence,
    )


def rotated_parabola_resolution(
    coeffs: CoefficientVector,
    confidence: float = ROTATED_CONFIDENCE,
) -> Optional[Resolution]:
    """Parabola whose axis is not parallel to x or y (`B != 0`, zero discriminant)."""
    quadratic = np.array([[coeffs.A, coeffs.B / 2], [coeffs.B / 2, coeffs.C]], dtype=float)
    eigenvalues, eigenvectors = np.linalg.eigh(quadratic)
    axis_index = int(np.argmin(np.abs(eigenvalues)))
    across = eigenvectors[:, 1 - axis_index]
    axis = eigenvectors[:, axis_index]
    curvature = float(eigenvalues[1 - axis_index])
    linear = np.array([coeffs.D, coeffs.E], dtype=float)
    linear_across = float(linear @ across)
    linear_axis = float(linear @ axis)
    if is_zero(curvature) or abs(linear_axis) < 1e-9:
        return None
    # t = a s^2 + b s + c with s along `across` and t along `axis`
    a = -curvature / linear_axis
    b = -linear_across / linear_axis
    c = -coeffs.F / linear_axis
    s0 = -b / (2 * a)
    t0 = c - b * b / (4 * a)
    focal = 1 / (4 * a)
    vertex = s0 * across + t0 * axis
    focus = vertex + focal * axis
    directrix_point = vertex - focal * axis
    angle = _axis_angle(axis)
    degrees = math.degrees(angle)
    return Resolution(
        conic_type=ConicType.PARABOLA,
        parameters=ConicParameters(
            vertex=_point(vertex[0], vertex[1]),
            focus1=_point(focus[0], focus[1]),
            directrix=line_through(
                (float(directrix_point[0]), float(directrix_point[1])),
                (float(across[0]), float(across[1])),
            ),
            eccentricity=1.0,
            rotation_angle=angle,
        ),
        standard_form=(
            f"{polynomial_form('Y', 'X', a, b, c)} "
            f"(asse Y ruotato di {_display(degrees)}° rispetto all'asse x)"
        ),
        explanation=(
            f"Riconosciuta come parabola con asse ruotato di {_display(degrees)}°. "
            f"Vertice: ({_display(vertex[0])}, {_display(vertex[1])})"
        ),
        confidence=confidence,
    )


def _completed_square(coeffs: CoefficientVector) -> Tuple[float, float, float]:
    h = -coeffs.D / (2 * coeffs.A)
    k = -coeffs.E / (2 * coeffs.C)
    constant = -coeffs.F + coeffs.A * h * h + coeffs.C * k * k
    return h, k, constant


def _resolve_circle(coeffs: CoefficientVector) -> Optional[Resolution]:
    if not nearly_equal(coeffs.A, coeffs.C) or is_zero(coeffs.A) or not is_zero(coeffs.B):
        return None
    h = -coeffs.D / (2 * coeffs.A)
    k = -coeffs.E / (2 * coeffs.A)
    radius_squared = (coeffs.D ** 2 + coeffs.E ** 2) / (4 * coeffs.A ** 2) - coeffs.F / coeffs.A
    return circle_resolution(h, k, radius_squared)


def _resolve_axis_aligned(conic_type: ConicType, coeffs: CoefficientVector) -> Optional[Resolution]:
    if is_zero(coeffs.A) or is_zero(coeffs.C):
        return None
    if conic_type is ConicType.ELLIPSE and coeffs.A < 0:
        coeffs = coeffs.scaled(-1.0)
    h, k, constant = _completed_square(coeffs)
    if conic_type is ConicType.ELLIPSE:
        if constant <= EPSILON:
            return None
        return ellipse_resolution(h, k, constant / coeffs.A, constant / coeffs.C)
    if is_zero(constant):
        return None
    if constant / coeffs.A > 0:
        return hyperbola_resolution(h, k, constant / coeffs.A, -constant / coeffs.C)
    return hyperbola_resolution(h, k, constant / coeffs.C, -constant / coeffs.A, vertical=True)


def _resolve_parabola(coeffs: CoefficientVector) -> Optional[Resolution]:
    if not is_zero(coeffs.B):
        return None
    if is_zero(coeffs.C) and not is_zero(coeffs.A) and not is_zero(coeffs.E):
        return parabola_resolution(-coeffs.A / coeffs.E, -coeffs.D / coeffs.E, -coeffs.F / coeffs.E)
    if is_zero(coeffs.A) and not is_zero(coeffs.C) and not is_zero(coeffs.D):
        return parabola_resolution(
            -coeffs.C / coeffs.D,
            -coeffs.E / coeffs.D,
            -coeffs.F / coeffs.D,
            horizontal=True,
        )
    return None


def resolve(conic_type: ConicType, coeffs: CoefficientVector) -> Optional[Resolution]:
    conic_type = refine_type(conic_type, coeffs)
    # Zero discriminant with a cross term: only a rotated parabola fits.
    if conic_type in (ConicType.CIRCLE, ConicType.PARABOLA) and not is_zero(coeffs.B):
        return rotated_parabola_resolution(coeffs)
    if conic_type is ConicType.CIRCLE:
        return _resolve_circle(coeffs)
    if conic_type in (ConicType.ELLIPSE, ConicType.HYPERBOLA):
        if not is_zero(coeffs.B):
            return rotated_resolution(coeffs, conic_type)
        return _resolve_axis_aligned(conic_type, coeffs)
    if conic_type is ConicType.PARABOLA:
        return _resolve_parabola(coeffs)
    return None


def has_empty_locus(coeffs: CoefficientVector) -> bool:
    """True for an axis-aligned circle or ellipse with no real points."""
    conic_type = refine_type(classify(coeffs), coeffs)
    if conic_type not in (ConicType.CIRCLE, ConicType.ELLIPSE):
        return False
    if not is_zero(coeffs.B) or is_zero(coeffs.A) or is_zero(coeffs.C):
        return False
    if coeffs.A < 0:
        coeffs = coeffs.scaled(-1.0)
    _, _, constant = _completed_square(coeffs)
    return constant <= EPSILON
