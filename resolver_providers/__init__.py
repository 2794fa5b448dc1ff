"""
Merge services: everything that turns one InputData into a resolved profile.
"""
from .protocol import MergeService
from .stub_service import StubMergeService

__all__ = ["MergeService", "StubMergeService"]
