from __future__ import annotations

from types import MappingProxyType

DEFAULT_RELIABILITY = 75

SOURCE_RELIABILITY = MappingProxyType(
    {
        "BBC": 95,
        "Reuters": 93,
        "Associated Press": 94,
        "The Guardian": 90,
        "The New York Times": 92,
        "The Washington Post": 91,
        "Bloomberg": 89,
        "CNN": 88,
        "NPR": 87,
        "Al Jazeera": 85,
        "NDTV": 80,
        "Times of India": 78,
        "Hindustan Times": 75,
    }
)


def get_source_reliability(source_name: str | None) -> int:
    """Reliability score (0-100) for a publisher name, 75 when unknown."""
    if not source_name:
        return DEFAULT_RELIABILITY
    return SOURCE_RELIABILITY.get(source_name, DEFAULT_RELIABILITY)


def average_reliability(source_names: list[str], default: float) -> float:
    if not source_names:
        return default
    return sum(get_source_reliability(name) for name in source_names) / len(source_names)
