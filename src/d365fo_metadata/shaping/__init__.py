"""Response shaping for metadata queries"""

from .shaper import OutputMode, ResponseShaper, ShapedOutput, get_field

__all__ = [
    "OutputMode",
    "ResponseShaper",
    "ShapedOutput",
    "get_field",
]
