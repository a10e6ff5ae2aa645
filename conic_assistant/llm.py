from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import httpx
from pydantic import ValidationError

from .config import Settings, load_settings
from .graphing import with_graphing_points
from .normalize import explicit_multiplication
from .schemas import ConicResult
from .strategies import parse_conic

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Sei un assistente di geometria analitica. Rispondi solo con JSON conforme allo schema fornito."
)

PROMPT_TEMPLATE = """
Analizza la seguente equazione matematica e determina che tipo di sezione conica rappresenta.
Devi eseguire tutti i calcoli algebrici necessari, combinando correttamente i termini simili.

Equazione: "{equation}"

Devi:
1. Combinare tutti i termini simili (tutti i termini in x², tutti i termini in x, ecc.)
2. Identificare il tipo di conica (parabola, circonferenza, ellisse, iperbole, o unknown se non riconoscibile)
3. Convertire l'equazione in forma standard
4. Estrarre tutti i parametri geometrici rilevanti:
   - Per circonferenze: centro e raggio
   - Per ellissi: centro, semiassi maggiore e minore, fuochi, eccentricità
   - Per parabole: vertice, fuoco, direttrice, coefficienti a, b, c
   - Per iperboli: centro, semiassi, fuochi, eccentricità, asintoti
5. Fornire una spiegazione del riconoscimento con i passaggi algebrici eseguiti
6. Calcolare alcuni punti per il grafico (opzionale)

Esempi di forme che devi riconoscere:
- Circonferenze: x² + y² = r², (x-h)² + (y-k)² = r², x² + y² + Dx + Ey + F = 0
- Ellissi: x²/a² + y²/b² = 1, (x-h)²/a² + (y-k)²/b² = 1
- Parabole: y = ax² + bx + c, x = ay² + by + c, y² = 4px, x² = 4py
- Iperboli: x²/a² - y²/b² = 1, y²/a² - x²/b² = 1, xy = k

Sii preciso nei calcoli matematici e fornisci una confidence tra 0 e 1.
"""


class AIParserError(RuntimeError):
    pass


def build_prompt(equation: str) -> str:
    return PROMPT_TEMPLATE.format(equation=equation).strip()


def response_format() -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "conic_analysis",
            "schema": ConicResult.model_json_schema(by_alias=True),
        },
    }


class ConicAIClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> None:
        if not settings.api_key:
            raise AIParserError("missing API key")
        self.model = settings.ai_model
        self.client = httpx.Client(
            base_url=settings.ai_base_url.rstrip("/"),
            timeout=settings.ai_timeout,
            headers={"Authorization": f"Bearer {settings.api_key}"},
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def analyze(self, equation: str) -> ConicResult:
        payload = {
            "model": self.model,
            "temperature": 0,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(equation)},
            ],
            "response_format": response_format(),
        }
        try:
            response = self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except httpx.HTTPError as exc:
            raise AIParserError(f"request failed: {exc}") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise AIParserError(f"unexpected response shape: {exc}") from exc
        if not isinstance(content, str):
            raise AIParserError("response content is not a string")
        try:
            return ConicResult.model_validate_json(content)
        except ValidationError as exc:
            raise AIParserError(f"schema mismatch: {exc.error_count()} errors") from exc


def analyze_equation(
    equation: str,
    settings: Optional[Settings] = None,
    client: Optional[ConicAIClient] = None,
    use_ai: bool = True,
) -> Tuple[ConicResult, str]:
    """Classify with the language model when configured, else with the cascade.

    Returns the result and its source, `"ai"` or `"fallback"`.
    """
    settings = settings or load_settings()
    if use_ai and (client is not None or settings.ai_available):
        owned = client is None
        try:
            active = client or ConicAIClient(settings)
            try:
                result = active.analyze(explicit_multiplication(equation))
            finally:
                if owned:
                    active.close()
            return with_graphing_points(result, settings.graph_samples), "ai"
        except AIParserError as exc:
            logger.warning("AI parsing failed, using fallback parser: %s", exc)
    return parse_conic(equation, settings.graph_samples), "fallback"
