from .api import TaskApiClient
from .runtime import TaskBoard
from .state import BoardState, Draft, update

__all__ = ["TaskApiClient", "TaskBoard", "BoardState", "Draft", "update"]
