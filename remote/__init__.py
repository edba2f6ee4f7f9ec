"""
Remote Module

Fetchers for the published item dataset.

This module provides:
- Unified BaseRemoteSource interface
- HTTP source with cache-busted version checks
- Local directory source for bundled data
- Static in-memory source for offline tests
"""

__version__ = "0.1.0"
