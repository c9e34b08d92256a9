from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from resume_analyzer.core.errors import ExtractionFailure, ExtractionFailureReason

from .models import DocumentFormat, ExtractionResult, ExtractionStrategy

logger = logging.getLogger(__name__)


class StrategyError(RuntimeError):
    """A single extraction strategy could not produce text.

    ``configuration`` marks failures caused by missing setup (e.g. an absent
    API key) rather than by the document itself.
    """

    def __init__(self, message: str, *, configuration: bool = False):
        super().__init__(message)
        self.configuration = configuration


@dataclass(frozen=True)
class Strategy:
    name: ExtractionStrategy
    run: Callable[[bytes], str]


@dataclass(frozen=True)
class FormatPlan:
    """Ordered strategies for one format plus the failure reported when all of them fail.

    With ``require_text`` a strategy that returns blank text counts as failed and
    the next strategy is tried.
    """

    document_format: DocumentFormat
    strategies: Sequence[Strategy]
    failure_reason: ExtractionFailureReason
    failure_message: str
    require_text: bool = False


def run_plan(plan: FormatPlan, content: bytes) -> ExtractionResult:
    warnings: list[str] = []
    for strategy in plan.strategies:
        try:
            text = strategy.run(content)
        except StrategyError as exc:
            kind = "configuration" if exc.configuration else "strategy"
            logger.warning(
                "extraction_strategy_failed format=%s strategy=%s kind=%s: %s",
                plan.document_format.value,
                strategy.name.value,
                kind,
                exc,
            )
            warnings.append(f"{strategy.name.value}: {exc}")
            continue
        except Exception as exc:  # noqa: BLE001 - each strategy is allowed to fail
            logger.warning(
                "extraction_strategy_failed format=%s strategy=%s kind=parse: %s",
                plan.document_format.value,
                strategy.name.value,
                exc,
            )
            warnings.append(f"{strategy.name.value}: {exc}")
            continue

        text = text or ""
        if plan.require_text and not text.strip():
            logger.info(
                "extraction_strategy_empty format=%s strategy=%s",
                plan.document_format.value,
                strategy.name.value,
            )
            warnings.append(f"{strategy.name.value}: no text produced")
            continue

        logger.info(
            "extraction_strategy_succeeded format=%s strategy=%s chars=%s",
            plan.document_format.value,
            strategy.name.value,
            len(text),
        )
        return ExtractionResult(text=text, strategy_used=strategy.name, warnings=warnings)

    raise ExtractionFailure(plan.failure_reason, plan.failure_message, warnings=warnings)
