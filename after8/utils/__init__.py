# after8/utils/__init__.py
"""
Utility functions package.

- general.py: service result handling and payload helpers
- match_utils.py: compatibility scoring (pairwise answers, score bands)
"""

from .general import _handle_service_result, success, error, validation_error

__all__ = [
    '_handle_service_result',
    'success',
    'error',
    'validation_error',
]
