"""
EtherMom Bot - Error types.
Every failure that ends a monitoring cycle is one of these; the entry point
logs them and exits normally.
"""


class EtherMomError(Exception):
    """Base class for all errors raised by the monitoring job."""


class ConfigError(EtherMomError):
    """Missing or invalid operator configuration."""


class JobDisabled(ConfigError):
    """The job is switched off in config.py."""


class TransportError(EtherMomError):
    """The pool API was unreachable or answered with a non-OK status."""


class NoWorkersError(EtherMomError):
    """The pool reported no active workers for the wallet."""


class DeliveryError(EtherMomError):
    """An alert could not be delivered to the messaging channel."""
