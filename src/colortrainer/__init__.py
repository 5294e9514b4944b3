import functools
import logging


def _fatal(e: Exception) -> bool:
    # A bad orientation means the resolver tables or the session are broken
    from colortrainer.orientation import InvalidOrientation

    return isinstance(e, InvalidOrientation)


def catch_errors(func):
    """
    Untrapped errors in PyQt event handlers can take down the application.
    Handlers use this decorator to log errors and carry on.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if _fatal(e):
                raise
            logging.exception(f"Error in event handler {func.__name__}: {e}")
            return None

    return wrapper

