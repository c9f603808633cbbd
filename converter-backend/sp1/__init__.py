"""SEG SP1 point format: data model, reader and writer.

Modules:
 - model: SP1Header / SP1Point / SP1Data dataclasses
 - reader: SP1 text -> SP1Data
 - writer: SP1Data -> SP1 text
 - numeric: lenient number parsing and fixed/plain formatting
 - errors: ConversionError hierarchy
"""

__all__ = [
    "errors",
    "model",
    "numeric",
    "reader",
    "writer",
]
