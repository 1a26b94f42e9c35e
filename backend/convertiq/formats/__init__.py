"""Format classifier: MIME type -> label, icon hint, allowed targets, routing category."""
from .classifier import DEFAULT_FILE_TYPE, FILE_TYPES, category_for, classify
from .schemas import ConversionCategory, FileTypeDescriptor

__all__ = [
    "DEFAULT_FILE_TYPE",
    "FILE_TYPES",
    "ConversionCategory",
    "FileTypeDescriptor",
    "category_for",
    "classify",
]
