from .step_defs import steps

__all__ = ["steps"]
