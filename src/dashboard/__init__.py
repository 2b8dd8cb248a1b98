from src.dashboard.context import DashboardContext

__all__ = [
    "DashboardContext",
]
