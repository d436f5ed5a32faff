"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime actor cannot be created."""


class BattleSetupError(Exception):
    """Raised when a battle cannot be started from the requested roster."""
