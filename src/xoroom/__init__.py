"""xoroom package exposing the room registry, match state and web application."""

from .registry import RoomRegistry
from .room import Room
from .server import app, create_app

__all__ = ["Room", "RoomRegistry", "app", "create_app"]
