"""Parser of declarative REST test steps.

The `restdo` package interprets a "do section", a YAML or JSON document
describing an API call to perform and the outcome expected from it, into
immutable models consumed by a test runner.

Key features:
- forward-only reading of composed YAML nodes with source positions;
- bodies given as maps, pre-serialized strings, or sequences of both;
- sequence parameters joined into comma-separated values;
- optional strict rejection of repeated keys.

Executing the call and checking its outcome is left to the caller.
"""

from .core import DoSectionParser
from .errors import ContentParseError, CursorError, ParseWarning, RestDoError, StructureError
from .sections import ApiCallSection, DoSection
from .settings import ParserSettings

__all__ = (
    'ApiCallSection',
    'ContentParseError',
    'CursorError',
    'DoSection',
    'DoSectionParser',
    'ParseWarning',
    'ParserSettings',
    'RestDoError',
    'StructureError',
)
