"""Parser runtime settings."""

from pydantic import Field

from restdo.models import SettingsModel


class ParserSettings(SettingsModel):
    """Configuration of the do section parser.

    Values are resolved from `RESTDO_*` environment variables unless
    passed explicitly.
    """

    strict_duplicate_keys: bool = Field(
        default=False,
        title='Strict duplicate keys',
        description=(
            'Reject documents repeating a key within the same map. '
            'When disabled, repeated keys are visited in encounter order, '
            'which lets an API call declare several `body` fields.'
        ),
    )
