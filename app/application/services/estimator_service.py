from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, TypeVar
import logging
import random

from ..pricing import (
    CATEGORIES,
    CUSTOM_ISSUE,
    diagnosis_prompt,
    heuristic_diagnosis,
    heuristic_price,
    instant_diagnosis,
    instant_price,
    is_predefined_issue,
    parse_usd_estimate,
    price_prompt,
    round_half_up,
    validate_custom_issue,
)
from ..ports.ai_provider import AIProvider, AIProviderError
from ..ports.diagnosis_repo import DiagnosisRepository
from ..ports.exchange_rate import ExchangeRateProvider
from . import notification_service as messages
from .notification_service import NotificationService
from ...exceptions import ValidationFailedError
from ...infrastructure.rate_limit.ai_throttle import AICallThrottle

logger = logging.getLogger(__name__)

T = TypeVar("T")

DIAGNOSIS_MAX_TOKENS = 200
DIAGNOSIS_TEMPERATURE = 0.3
PRICE_MAX_TOKENS = 10
PRICE_TEMPERATURE = 0.3


@dataclass
class EstimateRequest:
    category: str
    issue: str
    brand: Optional[str] = None
    model: Optional[str] = None
    custom_issue: Optional[str] = None


@dataclass
class EstimateResult:
    diagnosis: str
    estimated_cost: int
    source: str
    is_custom_issue: bool
    currency: str = "PHP"
    provider: Optional[str] = None
    diagnosis_id: Optional[str] = None


@dataclass
class EstimatorService:
    providers: List[AIProvider]
    exchange_rates: ExchangeRateProvider
    throttle: AICallThrottle
    diagnosis_repo: DiagnosisRepository
    notifier: NotificationService
    rng: random.Random = field(default_factory=random.Random)
    currency: str = "PHP"

    async def estimate(self, user_id: str, request: EstimateRequest) -> EstimateResult:
        if request.category not in CATEGORIES:
            raise ValidationFailedError(f"Invalid category. Must be one of: {CATEGORIES}")

        brand = (request.brand or "").strip() or None
        model = (request.model or "").strip() or None

        if request.issue == CUSTOM_ISSUE:
            result = await self._estimate_custom(user_id, request.category, request.custom_issue or "", brand, model)
        elif is_predefined_issue(request.category, request.issue):
            result = EstimateResult(
                diagnosis=instant_diagnosis(request.category, request.issue, brand, model),
                estimated_cost=instant_price(request.category, request.issue, brand, model, rng=self.rng),
                source="static",
                is_custom_issue=False,
                currency=self.currency,
            )
        else:
            raise ValidationFailedError(f"Unknown issue for {request.category}. Pick a listed issue or '{CUSTOM_ISSUE}'")

        issue_text = (request.custom_issue or "").strip() if result.is_custom_issue else request.issue
        result.diagnosis_id = self._save(user_id, request.category, issue_text, brand, model, result)
        self.notifier.emit(user_id, "diagnosis", messages.diagnosis_complete(request.category, result.estimated_cost))
        return result

    async def _estimate_custom(self, user_id: str, category: str, text: str, brand: Optional[str], model: Optional[str]) -> EstimateResult:
        validation = validate_custom_issue(text)
        if not validation.is_valid:
            raise ValidationFailedError(validation.reason)
        issue = text.strip()

        diagnosis, diagnosis_provider = await self._ask(
            diagnosis_prompt(category, issue, brand, model),
            DIAGNOSIS_MAX_TOKENS,
            DIAGNOSIS_TEMPERATURE,
            parse=self._clean_diagnosis,
        )
        if diagnosis is None:
            diagnosis = heuristic_diagnosis(category, issue, brand, model)

        usd, price_provider = await self._ask(
            price_prompt(category, issue, brand, model),
            PRICE_MAX_TOKENS,
            PRICE_TEMPERATURE,
            parse=parse_usd_estimate,
            spacing_key=user_id,
        )
        if usd is not None:
            rate = await self.exchange_rates.usd_rate(self.currency)
            cost = round_half_up(usd * rate)
        else:
            cost = heuristic_price(category, issue, brand, rng=self.rng)

        from_ai = diagnosis_provider is not None and price_provider is not None
        if not from_ai:
            logger.info(f"Custom {category} estimate used heuristic fallback (diagnosis={diagnosis_provider}, price={price_provider})")
        return EstimateResult(
            diagnosis=diagnosis,
            estimated_cost=cost,
            source="ai" if from_ai else "heuristic",
            is_custom_issue=True,
            currency=self.currency,
            provider=diagnosis_provider or price_provider,
        )

    async def _ask(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        parse: Callable[[str], T],
        spacing_key: Optional[str] = None,
    ) -> Tuple[Optional[T], Optional[str]]:
        """Try each provider in order; ``(None, None)`` means the caller should fall back."""
        if not self.providers:
            return None, None
        if spacing_key is not None and self.throttle.available():
            await self.throttle.wait_turn(spacing_key)

        for provider in self.providers:
            if not self.throttle.available():
                logger.info("AI calls are cooling down after rate limiting, using fallback")
                return None, None
            try:
                text = await provider.complete(prompt, max_tokens=max_tokens, temperature=temperature)
                value = parse(text)
            except AIProviderError as e:
                if e.rate_limited:
                    self.throttle.record_rate_limit()
                logger.warning(f"AI provider {provider.name} failed: {e}")
                continue
            except ValueError as e:
                logger.warning(f"AI provider {provider.name} returned an unusable answer: {e}")
                continue
            except Exception as e:
                logger.error(f"AI provider {provider.name} raised an unexpected error: {e}")
                continue
            self.throttle.record_success()
            return value, provider.name
        return None, None

    @staticmethod
    def _clean_diagnosis(text: str) -> str:
        cleaned = (text or "").strip().strip('"').strip()
        if not cleaned:
            raise ValueError("Empty diagnosis")
        return cleaned

    def _save(self, user_id: str, category: str, issue: str, brand: Optional[str], model: Optional[str], result: EstimateResult) -> Optional[str]:
        try:
            record = self.diagnosis_repo.create(
                user_id=user_id,
                category=category,
                issue_description=issue,
                diagnosis=result.diagnosis,
                estimated_cost=result.estimated_cost,
                source=result.source,
                is_custom_issue=result.is_custom_issue,
                brand=brand,
                model=model,
                provider=result.provider,
            )
            return record.id
        except Exception as e:
            logger.error(f"Error saving diagnosis for {user_id}: {e}")
            return None
