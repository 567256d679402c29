"""
Errors raised while starting or talking to the Byzer engine.
"""


class EngineError(Exception):
    """Base class for engine failures."""


class EngineStartError(EngineError):
    """The engine process could not be started or never became ready."""


class EngineRequestError(EngineError):
    """A script request could not be delivered or answered."""
