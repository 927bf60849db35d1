"""Cost engine modules for PrintCostWeb."""

__all__ = [
    "calculator",
    "cost_aggregator",
    "numeric",
    "pricing",
    "rate_resolver",
]
