"""Nutrition feedback for a weekly kit, generated by an LLM."""

import logging
from dataclasses import dataclass
from typing import Protocol

from matelli_store.domain.selection import SelectionState
from matelli_store.services.aggregation import meal_names_by_day

INSIGHT_FALLBACK = (
    "Sua escolha foi excelente! Equilíbrio e sabor para todos os seus dias."
)
EMPTY_INSIGHT_FALLBACK = (
    "Seu planejamento semanal está excelente! "
    "Uma jornada nutritiva e saborosa te espera."
)

_logger = logging.getLogger(__name__)


class InsightClient(Protocol):
    """Interface for free-text generation."""

    async def generate(
        self, *, model: str, prompt: str, max_output_tokens: int
    ) -> str:
        """Return generated text for the prompt."""


@dataclass
class InsightService:
    """Builds the kit summary prompt and never lets a failure escape."""

    client: InsightClient
    model: str
    max_output_tokens: int = 500

    async def get_insight(self, selection: SelectionState) -> str:
        """Return short nutritionist feedback, or a neutral fallback."""
        prompt = build_prompt(meal_names_by_day(selection))
        try:
            text = await self.client.generate(
                model=self.model,
                prompt=prompt,
                max_output_tokens=self.max_output_tokens,
            )
        except Exception:
            _logger.exception("Insight generation failed")
            return INSIGHT_FALLBACK
        return text.strip() or EMPTY_INSIGHT_FALLBACK


def build_prompt(names_by_day: dict[str, list[str]]) -> str:
    """Render the day -> meal names summary into the request prompt."""
    summary = "\n".join(
        f"{day}: {', '.join(names)}" for day, names in names_by_day.items()
    )
    return (
        "O usuário montou o seguinte kit semanal de marmitas congeladas "
        "organizado por dias da semana:\n"
        f"{summary}\n\n"
        "Como um nutricionista especialista, dê um feedback curto e motivador "
        "sobre esse planejamento semanal em português brasileiro. "
        "Analise se a distribuição das refeições ao longo dos dias está "
        "variada e equilibrada. Mantenha o tom profissional mas acolhedor. "
        "No máximo 3 parágrafos curtos."
    )
