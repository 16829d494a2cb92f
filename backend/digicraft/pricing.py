from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, Optional

from .schemas import CostEntry, ProductCostData, Usage

# USD per 1M tokens
MODEL_PRICING: Dict[str, Dict[str, float]] = {
    "gemini-2.5-pro": {"input": 1.25, "output": 10.0},
    "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
    "gemini-2.5-flash-lite": {"input": 0.10, "output": 0.40},
    "gemini-2.0-flash": {"input": 0.10, "output": 0.40},
    "gemini-2.0-flash-lite": {"input": 0.075, "output": 0.30},
}


def calculate_cost(usage: Usage, model: str) -> float:
    pricing = MODEL_PRICING.get(model)
    if not pricing:
        return 0.0
    cost = (usage.input_tokens / 1_000_000) * pricing["input"] + (usage.output_tokens / 1_000_000) * pricing["output"]
    return round(cost, 6)


def usage_meta(usage: Usage, model: str) -> Dict[str, object]:
    """The ``_usage`` block appended to responses."""
    return {
        "promptTokens": usage.input_tokens,
        "completionTokens": usage.output_tokens,
        "totalTokens": usage.total_tokens,
        "model": model,
        "cost": calculate_cost(usage, model),
    }


def cost_entry(route: str, action: str, model: str, usage: Usage, timestamp: Optional[str] = None) -> CostEntry:
    return CostEntry(
        route=route,
        action=action,
        model=model,
        usage=usage,
        cost=calculate_cost(usage, model),
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
    )


def add_cost_entry(data: ProductCostData, entry: CostEntry) -> ProductCostData:
    return ProductCostData(
        entries=[*data.entries, entry],
        total_cost=round(data.total_cost + entry.cost, 6),
        total_input_tokens=data.total_input_tokens + entry.usage.input_tokens,
        total_output_tokens=data.total_output_tokens + entry.usage.output_tokens,
    )
