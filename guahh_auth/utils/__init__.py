"""Utility modules for Guahh Auth."""

from __future__ import annotations

# Async helpers
from .async_helpers import AwaitableValue, task_wrapper

# JSON utilities
from .json_utils import json_load, json_minify, json_save, merge_json


__all__ = [
    # JSON utilities
    "json_minify",
    "json_load",
    "json_save",
    "merge_json",
    # Async helpers
    "task_wrapper",
    "AwaitableValue",
]
