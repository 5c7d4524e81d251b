from __future__ import annotations

from dataclasses import dataclass

from ..core.exceptions import ValidationError
from .policies.base import PunchPolicy
from .policies.multi_session import MultiSessionPolicy
from .policies.single_session import SingleSessionPolicy


@dataclass
class PunchPolicyFactory:
    """Factory Pattern: choose the punch policy from configuration."""

    def for_name(self, name: str | None) -> PunchPolicy:
        key = (name or SingleSessionPolicy.name).strip().lower()
        if key == SingleSessionPolicy.name:
            return SingleSessionPolicy()
        if key == MultiSessionPolicy.name:
            return MultiSessionPolicy()
        raise ValidationError(f"Unknown punch policy: {name!r}")
