from gridzen.backend.engine.gameplay.game import GamePlay, MoveOutcome

__all__ = ["GamePlay", "MoveOutcome"]
