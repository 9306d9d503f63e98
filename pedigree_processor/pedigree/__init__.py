"""
Pedigree Conversion Module

Converts pedigree editor JSON into patient record JSON.

Components:
- document: Pedigree wrapper and individual extraction
- mappers: Per-field-group mappers
- converter: Main conversion service
"""
from .document import Pedigree, PedigreeFormatError
from .converter import PedigreeConverter, ConversionResult, FieldError

__all__ = [
    "Pedigree",
    "PedigreeFormatError",
    "PedigreeConverter",
    "ConversionResult",
    "FieldError",
]
