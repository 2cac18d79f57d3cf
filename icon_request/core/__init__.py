"""
Core request pipeline.

The `RequestOrchestrator` drives a single send: the `ArchiveAssembler` stages
icons and manifests rendered by the manifest builder, zips them, and the
resulting archive is handed to the delivery router.
"""

from .assembler import ArchiveAssembler
from .manifest import BothPlan, JsonPlan, LegacyPlan, ManifestPlan, plan_manifest
from .orchestrator import RequestOrchestrator

__all__ = [
    "ArchiveAssembler",
    "BothPlan",
    "JsonPlan",
    "LegacyPlan",
    "ManifestPlan",
    "RequestOrchestrator",
    "plan_manifest",
]
