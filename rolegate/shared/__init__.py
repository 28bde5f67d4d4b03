"""Shared utilities: logging setup and cross-cutting helpers.

Used by application, infrastructure, and api. No business logic.
"""

from rolegate.shared.utils import generate_cuid, utc_now

__all__ = [
    "generate_cuid",
    "utc_now",
]
