class ConfigurationError(ValueError):
    """Parameters are inconsistent; raised before any generation runs."""


class InvariantViolation(RuntimeError):
    """A tour is not a permutation of the points it should visit."""


class EmptyPopulationError(ValueError):
    pass
