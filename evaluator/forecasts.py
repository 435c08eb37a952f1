"""Templated 3-year revenue and unit-sales curves.

Forecasts depend only on the tier: each base value is jittered by an
independent multiplier in [0.85, 1.15] and rounded to a fixed step. The base
tables are data and can be replaced with a JSON file of the same shape as
``ForecastTemplates``.
"""

import logging
import math
import random
from pathlib import Path

from pydantic import BaseModel, ValidationError

from datamodels import RevenueForecast, Tier, UnitSalesForecast

logger = logging.getLogger(__name__)

JITTER_LOW = 0.85
JITTER_HIGH = 1.15
REVENUE_STEP = 5000
UNITS_STEP = 100


class YearlyBase(BaseModel):
    year_1: float
    year_2: float
    year_3: float


class ForecastTemplates(BaseModel):
    revenue: dict[Tier, YearlyBase]
    unit_sales: dict[Tier, YearlyBase]


DEFAULT_TEMPLATES = ForecastTemplates(
    revenue={
        Tier.BAD: YearlyBase(year_1=-20000, year_2=-8000, year_3=0),
        Tier.MEDIUM: YearlyBase(year_1=180000, year_2=320000, year_3=550000),
        Tier.GOOD: YearlyBase(year_1=650000, year_2=1400000, year_3=2800000),
    },
    unit_sales={
        Tier.BAD: YearlyBase(year_1=500, year_2=200, year_3=0),
        Tier.MEDIUM: YearlyBase(year_1=3000, year_2=6000, year_3=10000),
        Tier.GOOD: YearlyBase(year_1=15000, year_2=35000, year_3=70000),
    },
)


def load_templates(path: str | None = None) -> ForecastTemplates:
    """Return the templates stored at ``path``, or the built-in ones."""
    if not path:
        return DEFAULT_TEMPLATES
    try:
        templates = ForecastTemplates.model_validate_json(Path(path).read_text())
    except (OSError, ValidationError) as e:
        raise ValueError(f'Could not load forecast templates from {path}: {e}') from e
    missing = set(Tier) - set(templates.revenue) | set(Tier) - set(templates.unit_sales)
    if missing:
        raise ValueError(f'Forecast templates in {path} miss tiers: {sorted(missing)}')
    logger.info("Loaded forecast templates from %s", path)
    return templates


def jitter(base: float, step: int, rng: random.Random | None = None) -> int:
    """Scale ``base`` by a fresh multiplier in [0.85, 1.15] and round half up to ``step``."""
    spread = base * (rng or random).uniform(JITTER_LOW, JITTER_HIGH)
    return int(math.floor(spread / step + 0.5)) * step


def revenue_forecast(
    tier: Tier,
    rng: random.Random | None = None,
    templates: ForecastTemplates = DEFAULT_TEMPLATES,
) -> RevenueForecast:
    base = templates.revenue[Tier(tier)]
    return RevenueForecast(
        year_1=jitter(base.year_1, REVENUE_STEP, rng),
        year_2=jitter(base.year_2, REVENUE_STEP, rng),
        year_3=jitter(base.year_3, REVENUE_STEP, rng),
    )


def unit_sales_forecast(
    tier: Tier,
    rng: random.Random | None = None,
    templates: ForecastTemplates = DEFAULT_TEMPLATES,
) -> UnitSalesForecast:
    base = templates.unit_sales[Tier(tier)]
    return UnitSalesForecast(
        year_1=jitter(base.year_1, UNITS_STEP, rng),
        year_2=jitter(base.year_2, UNITS_STEP, rng),
        year_3=jitter(base.year_3, UNITS_STEP, rng),
    )
