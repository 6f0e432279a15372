"""HTTP number provider backed by httpx."""

from avgcalc.providers.http.client import HttpNumberProvider

__all__ = ["HttpNumberProvider"]
