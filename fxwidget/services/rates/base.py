from __future__ import annotations

"""Rate provider abstraction.

The controller only depends on this interface, so tests can hand it a fake
provider with canned tables and a call counter.
"""
from abc import ABC, abstractmethod
from typing import Mapping

RateTable = Mapping[str, float]


class RateProvider(ABC):
    @abstractmethod
    async def fetch_rates(self, base: str) -> RateTable:
        """Return the rate table for ``base`` (target code -> factor)."""
        raise NotImplementedError
