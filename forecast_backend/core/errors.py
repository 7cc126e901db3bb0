"""Errors raised by the forecast core."""


class ForecastInputError(ValueError):
    """Assumptions the engine cannot turn into finite numbers."""


class ScenarioError(ValueError):
    """Invalid set of scenarios handed to the comparison."""
