from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from .schemas import ConicParameters, ConicResult, ConicType, Point

DEFAULT_SAMPLES = 100
PARABOLA_HALF_WIDTH = 10.0
HYPERBOLA_PARAMETER_RANGE = 3.0


def _axis_angle(parameters: ConicParameters) -> float:
    if parameters.rotation_angle is not None:
        return parameters.rotation_angle
    center = parameters.center
    focus = parameters.focus1
    if center is None or focus is None:
        return 0.0
    if abs(focus.y - center.y) > abs(focus.x - center.x):
        return math.pi / 2
    return 0.0


def _to_points(xs: np.ndarray, ys: np.ndarray) -> List[Point]:
    return [Point(x=float(x), y=float(y)) for x, y in zip(xs, ys) if math.isfinite(x) and math.isfinite(y)]


def _frame(parameters: ConicParameters) -> Tuple[float, float, np.ndarray, np.ndarray]:
    center = parameters.center or Point(x=0.0, y=0.0)
    angle = _axis_angle(parameters)
    major = np.array([math.cos(angle), math.sin(angle)])
    minor = np.array([-math.sin(angle), math.cos(angle)])
    return center.x, center.y, major, minor


def ellipse_points(parameters: ConicParameters, samples: int) -> List[Point]:
    if parameters.radius is not None:
        a = b = parameters.radius
    else:
        a = parameters.semi_major_axis
        b = parameters.semi_minor_axis
    if a is None or b is None:
        return []
    h, k, major, minor = _frame(parameters)
    t = np.linspace(0.0, 2 * math.pi, samples + 1)
    xs = h + a * np.cos(t) * major[0] + b * np.sin(t) * minor[0]
    ys = k + a * np.cos(t) * major[1] + b * np.sin(t) * minor[1]
    return _to_points(xs, ys)


def hyperbola_points(parameters: ConicParameters, samples: int) -> List[Point]:
    a = parameters.semi_major_axis
    b = parameters.semi_minor_axis
    if a is None or b is None:
        return []
    h, k, major, minor = _frame(parameters)
    t = np.linspace(-HYPERBOLA_PARAMETER_RANGE, HYPERBOLA_PARAMETER_RANGE, max(samples // 2, 2))
    points: List[Point] = []
    for branch in (1.0, -1.0):
        along = branch * a * np.cosh(t)
        across = b * np.sinh(t)
        xs = h + along * major[0] + across * minor[0]
        ys = k + along * major[1] + across * minor[1]
        points.extend(_to_points(xs, ys))
    return points


def focal_parabola_points(parameters: ConicParameters, samples: int) -> List[Point]:
    vertex = parameters.vertex
    focus = parameters.focus1
    if vertex is None or focus is None:
        return []
    axis = np.array([focus.x - vertex.x, focus.y - vertex.y])
    focal = float(np.hypot(axis[0], axis[1]))
    if focal == 0.0:
        return []
    axis = axis / focal
    normal = np.array([-axis[1], axis[0]])
    s = np.linspace(-PARABOLA_HALF_WIDTH, PARABOLA_HALF_WIDTH, samples + 1)
    along = s * s / (4 * focal)
    xs = vertex.x + s * normal[0] + along * axis[0]
    ys = vertex.y + s * normal[1] + along * axis[1]
    return _to_points(xs, ys)


def parabola_points(parameters: ConicParameters, samples: int) -> List[Point]:
    if parameters.rotation_angle is not None:
        return focal_parabola_points(parameters, samples)
    coefficients = parameters.coefficients
    if coefficients is None or coefficients.a is None:
        return []
    a = coefficients.a
    b = coefficients.b or 0.0
    c = coefficients.c or 0.0
    horizontal = bool(parameters.directrix and parameters.directrix.startswith("x"))
    vertex = parameters.vertex or Point(x=0.0, y=0.0)
    middle = vertex.y if horizontal else vertex.x
    free = np.linspace(middle - PARABOLA_HALF_WIDTH, middle + PARABOLA_HALF_WIDTH, samples + 1)
    bound = a * free * free + b * free + c
    if horizontal:
        return _to_points(bound, free)
    return _to_points(free, bound)


def graphing_points(result: ConicResult, samples: int = DEFAULT_SAMPLES) -> Optional[List[Point]]:
    if samples <= 0:
        return None
    parameters = result.parameters
    if result.type in (ConicType.CIRCLE, ConicType.ELLIPSE):
        points = ellipse_points(parameters, samples)
    elif result.type is ConicType.HYPERBOLA:
        points = hyperbola_points(parameters, samples)
    elif result.type is ConicType.PARABOLA:
        points = parabola_points(parameters, samples)
    else:
        return None
    return points or None


def with_graphing_points(result: ConicResult, samples: int = DEFAULT_SAMPLES) -> ConicResult:
    if result.graphing_points:
        return result
    points = graphing_points(result, samples)
    if points is None:
        return result
    return result.model_copy(update={"graphing_points": points})
