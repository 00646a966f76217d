from .hallway import SYMBOL_O, SYMBOL_X, HallwayRandomizer, HallwayWorld

__all__ = ["HallwayWorld", "HallwayRandomizer", "SYMBOL_X", "SYMBOL_O"]
