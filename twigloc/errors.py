"""
User-facing errors of twig-locator.

The CLI prints subclasses of TwigLocUserError as a one-line message and
exits with code 2; anything else keeps its traceback.

Unresolved template references are NOT errors: resolvers return None.
I/O failures while loading a document propagate as OSError.
"""

from __future__ import annotations


class TwigLocUserError(Exception):
    """
    Base class for all user-facing errors in twig-locator.

    These errors indicate problems that the user can fix:
    malformed settings, unknown framework, etc.
    """
    pass


class SettingsError(TwigLocUserError):
    """Raised when the settings file cannot be read or validated."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)


class DocumentUnavailableError(TwigLocUserError):
    """Raised by coordinators when a template cannot be read."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read template {path}: {cause.strerror or cause}")


class FrameworkNotDetectedError(TwigLocUserError):
    """Raised when a command needs a framework and none could be determined."""

    def __init__(self, workspace: str):
        self.workspace = workspace
        super().__init__(
            f"`twiggy.framework` is required: could not guess the framework for {workspace}"
        )


__all__ = ["TwigLocUserError", "SettingsError", "DocumentUnavailableError", "FrameworkNotDetectedError"]
