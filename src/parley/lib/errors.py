"""Exception hierarchy for the conversation driver.

Nothing here is caught locally: the driver only guarantees cleanup
(channel close, closing line, transcript save) before these propagate.
"""


class ParleyError(Exception):
    """Base class for driver errors."""


class UnexpectedEventError(ParleyError, TypeError):
    """The conversation channel produced an object that is not a known event."""


class StreamProtocolError(ParleyError):
    """Delta events arrived out of the start / fragment / stop order."""


class ConfigError(ParleyError, ValueError):
    """An external configuration file is missing or malformed."""
