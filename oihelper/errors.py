"""Base exception for everything oihelper raises on purpose."""


class OIHelperError(Exception):
    """Aborts the current command. The CLI reports the message and exits
    with a non-zero status.
    """
    pass
