"""Shared utilities: datetime and generators."""

from rolegate.shared.utils.datetime import utc_now
from rolegate.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
]
