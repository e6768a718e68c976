"""Aggregate FastAPI routers for inclusion in the application."""
from . import commands, health

all_routers = [
    commands.router,
    health.router,
]
