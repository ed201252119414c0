"""Core do section parsing.

This module defines the parsing pipeline turning a do section document
into immutable section models:

- a forward-only cursor over composed YAML mappings;
- a body normalizer handling map, string and sequence bodies;
- an API call builder separating bodies from parameters;
- the do section parser dispatching reserved fields.

The primary public entry point is `DoSectionParser`.
"""

from .body import BodyNormalizer
from .cursor import DocumentCursor
from .parser import MISSING_API_CALL, DoSectionParser

__all__ = (
    'MISSING_API_CALL',
    'BodyNormalizer',
    'DoSectionParser',
    'DocumentCursor',
)
