"""
UI Module

Presentation collaborators driven by the refresh cycle and search session.

This module provides:
- UICollaborator protocol consumed by the core
- NullUI and RecordingUI doubles for headless runs and tests
- ConsoleUI terminal renderer with a tqdm progress spinner
"""

__version__ = "0.1.0"
