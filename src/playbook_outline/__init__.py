"""Playbook outline engine: normalize, address, flatten and edit nested playbooks."""

from __future__ import annotations

__version__ = "0.1.0"
