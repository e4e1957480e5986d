"""
Reporting package

Inspection sessions over whole files and rendering of their results.
"""

from .inspector import (
    Inspector,
    InspectorOptions,
    InspectionResult,
    InspectionStatus,
    get_inspector,
    reset_inspector
)
from .emitter import ReportEmitter, SEPARATOR

__all__ = [
    'Inspector',
    'InspectorOptions',
    'InspectionResult',
    'InspectionStatus',
    'get_inspector',
    'reset_inspector',
    'ReportEmitter',
    'SEPARATOR'
]
