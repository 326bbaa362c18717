"""Custom exception hierarchy for dynhelp."""


class DynHelpError(Exception):
    """Base exception for app-specific failures."""


class ConfigError(ValueError, DynHelpError):
    """Profile, option, or help catalog validation errors."""


class OverlayStateError(RuntimeError, DynHelpError):
    """Overlay drawn or cleared out of lifecycle order."""


class ExternalPagerError(DynHelpError):
    """The configured external pager failed; the built-in pager was shown instead.

    The launch failure is chained as ``__cause__``. ``scrolled_rows`` is the
    number of rows the fallback overlay scrolled the screen, so the caller can
    still redraw its input at the right place.
    """

    def __init__(self, command: str, scrolled_rows: int = 0) -> None:
        super().__init__(
            f"External pager '{command}' failed; showing built-in help instead."
        )
        self.command = command
        self.scrolled_rows = scrolled_rows
        # Set by the dispatcher: the editor snapshot corrected for the fallback.
        self.snapshot: object | None = None
