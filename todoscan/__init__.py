"""
todoscan
Collects TODO/FIXME style comment blocks from a source tree as task records
"""

import logging

from .scanner.errors import ScannerError, ScanRootError
from .scanner.generator import TodoGenerator, generate_tasks
from .scanner.models import ParseIssue, ScanPreferences, ScanResult, TaskRecord

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'TodoGenerator',
    'generate_tasks',
    'TaskRecord',
    'ParseIssue',
    'ScanPreferences',
    'ScanResult',
    'ScannerError',
    'ScanRootError',
]

__version__ = '1.0.0'
