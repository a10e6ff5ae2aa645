from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConicType(str, Enum):
    PARABOLA = "parabola"
    CIRCLE = "circonferenza"
    ELLIPSE = "ellisse"
    HYPERBOLA = "iperbole"
    UNKNOWN = "unknown"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Point(WireModel):
    x: float
    y: float


class Coefficients(WireModel):
    a: Optional[float] = None
    b: Optional[float] = None
    c: Optional[float] = None
    d: Optional[float] = None
    e: Optional[float] = None
    f: Optional[float] = None


class ConicParameters(WireModel):
    center: Optional[Point] = None
    radius: Optional[float] = None
    semi_major_axis: Optional[float] = None
    semi_minor_axis: Optional[float] = None
    focus1: Optional[Point] = None
    focus2: Optional[Point] = None
    vertex: Optional[Point] = None
    directrix: Optional[str] = None
    eccentricity: Optional[float] = None
    coefficients: Optional[Coefficients] = None
    asymptotes: Optional[List[str]] = None
    rotation_angle: Optional[float] = None


class ConicResult(WireModel):
    type: ConicType
    confidence: float = Field(ge=0.0, le=1.0)
    standard_form: str
    parameters: ConicParameters = Field(default_factory=ConicParameters)
    explanation: str
    graphing_points: Optional[List[Point]] = None


class ParseRequest(WireModel):
    equation: Optional[str] = None
    use_ai: bool = Field(default=True, alias="useAI")


class ParseResponse(ConicResult):
    source: str = "fallback"


class PolynomialRequest(WireModel):
    equation: Optional[str] = None


class PolynomialAnalysis(WireModel):
    original_equation: str
    normalized_equation: str = ""
    terms: Dict[str, float] = Field(default_factory=dict)
    formatted_result: str = ""
    conic_type: ConicType = ConicType.UNKNOWN
    coefficients: Dict[str, float] = Field(default_factory=dict)
    discriminant: Optional[float] = None
    error: Optional[str] = None


class ParameterRow(WireModel):
    name: str
    value: str
    description: str


class DisplayResponse(WireModel):
    rows: List[ParameterRow]


class ErrorResponse(WireModel):
    error: str
    details: Optional[Any] = None
