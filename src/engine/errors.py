"""Exceptions raised by the inference engine."""


class InvariantError(RuntimeError):
    """
    An internal engine invariant was violated.

    Raised for states that cannot occur when events are delivered once and in
    game order, e.g. a pending inference referring to an arena index no hand
    holds any more. Never caught inside the engine.
    """
