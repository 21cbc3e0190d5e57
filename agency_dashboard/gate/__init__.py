from .guard import AccessGate, ApprovalSource, Navigator, is_auth_path
from .polling import FocusEvents, PollingTask
from .states import LOADING, GateState

__all__ = [
    "AccessGate",
    "ApprovalSource",
    "FocusEvents",
    "GateState",
    "LOADING",
    "Navigator",
    "PollingTask",
    "is_auth_path",
]
