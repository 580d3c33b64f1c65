"""Archroot installer (in-place distribution migration).

Core design goals:
- One re-executable file that plays three roles across a reboot
- Phase derived from filesystem facts, never from a stored checkpoint
- Fail-fast package acquisition with a verified local cache
- Final root swap by hard-link, not by copy
- Centralized logging
"""

__all__ = []
