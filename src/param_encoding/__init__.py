"""
Per-action parameter encoding declarations for web controllers.
"""

from .controller.api import (
    ParameterEncodingController,
    param_encoding,
    skip_parameter_encoding,
)
from .controller.registry import (
    EncodingConfigError,
    EncodingRegistry,
    UntemplatedActionError,
)
from .encodings import EncodingTag, retag

__all__ = [
    "EncodingConfigError",
    "EncodingRegistry",
    "EncodingTag",
    "ParameterEncodingController",
    "UntemplatedActionError",
    "param_encoding",
    "retag",
    "skip_parameter_encoding",
]
