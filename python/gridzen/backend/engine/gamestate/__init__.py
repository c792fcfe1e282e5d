from gridzen.backend.engine.gamestate.clock import SessionClock
from gridzen.backend.engine.gamestate.state import GamePhase, GameSession

__all__ = ["GamePhase", "GameSession", "SessionClock"]
