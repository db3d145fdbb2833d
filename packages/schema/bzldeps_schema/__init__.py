"""
bzldeps schema - validated configuration and manifest models.
"""

from .loader import load_manifest, load_modules_mapping
from .manifest_v1 import (
    Manifest,
    ModuleRecord,
    PythonConfig,
    ResolveDirective,
    RuleSpec,
)

__all__ = [
    "PythonConfig",
    "ResolveDirective",
    "ModuleRecord",
    "RuleSpec",
    "Manifest",
    "load_manifest",
    "load_modules_mapping",
]
