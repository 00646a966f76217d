from .builder import ObservationBuilder

__all__ = ["ObservationBuilder"]
