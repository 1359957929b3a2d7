# whiteboard_sim/exceptions.py
"""
Custom exceptions for the whiteboard simulator.
"""


class WhiteboardError(Exception):
    """Base exception class for all whiteboard simulator errors."""
    def __init__(self, message, *args, wheel=None, **kwargs):
        super().__init__(message, *args)
        self.message = message
        self.wheel = wheel

    def __str__(self):
        base_message = super().__str__()

        details = []
        if self.wheel is not None:
            details.append(f"Wheel: {self.wheel}")

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class ParameterError(WhiteboardError):
    """Exception for invalid parameters provided to API functions."""



class KinematicsError(WhiteboardError):
    """Errors related to kinematic calculations."""



class InvalidGeometry(KinematicsError):
    """The configured device dimensions cannot describe a real machine."""



class UnreachablePose(KinematicsError):
    """The string lengths cannot form a triangle with the pulley separation."""

    def __init__(self, message, string_lengths=None, wheel=None):
        super().__init__(message, wheel=wheel)
        self.string_lengths = string_lengths

    def __str__(self):
        base_msg = super().__str__()
        if self.string_lengths is not None:
            lengths = ", ".join(f"{length:.3f}" for length in self.string_lengths)
            return f"{base_msg} - String lengths: [{lengths}]"
        return base_msg


class CommandError(WhiteboardError):
    """Exception for errors related to parsing wheel commands."""

    def __init__(self, message, line_number=None):
        super().__init__(message)
        self.line_number = line_number

    def __str__(self):
        if self.line_number is not None:
            return f"Line {self.line_number}: {self.message}"
        return self.message


class ConfigurationError(WhiteboardError):
    """Errors related to simulator configuration."""

