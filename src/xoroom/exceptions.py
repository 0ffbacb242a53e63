"""Errors reported back to the client that sent the offending request.

Every subclass carries a human-readable ``message``; the connection handler
catches :class:`RoomError` once and turns it into an ``error`` frame. None of
these leave room or registry state modified.
"""


class RoomError(Exception):
    """Base class for every error surfaced to a client."""

    message = "Request failed."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ============ Protocol errors ============

class InvalidMessage(RoomError):
    """Frame could not be decoded as a ``{type, payload}`` envelope."""
    message = "Invalid message."


class UnknownAction(RoomError):
    """Envelope ``type`` is not one of the supported actions."""
    message = "Unrecognized action."

    def __init__(self, action=None):
        self.action = action
        super().__init__()


class MissingFields(RoomError):
    """Code, password or username absent or blank."""
    message = "Code, password and username are required."


class OutOfRange(RoomError):
    """Move index is not an integer between 0 and 8."""
    message = "Invalid move."


# ============ Precondition errors ============

class CodeInUse(RoomError):
    """A room with participants already uses this code."""
    message = "An active room already uses that code."

    def __init__(self, code):
        self.code = code
        super().__init__()


class RoomNotFound(RoomError):
    """No room is registered under the code."""
    message = "No room exists with that code."

    def __init__(self, code):
        self.code = code
        super().__init__()


class RoomUnavailable(RoomNotFound):
    """The room the connection was in has since been removed."""
    message = "The room is no longer available."


class BadPassword(RoomError):
    message = "Incorrect password."


class RoomFull(RoomError):
    message = "The room is already full."


class NotInRoom(RoomError):
    message = "You are not in a room."


class NotYourTurn(RoomError):
    message = "It is not your turn."
