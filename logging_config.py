import logging

# ANSI escape codes per level name.
COLORS = {
    "DEBUG": "\033[90m",     # Light Gray
    "INFO": "\033[0m",       # Default
    "WARNING": "\033[33m",   # Orange
    "ERROR": "\033[31m",     # Red
    "CRITICAL": "\033[95m",  # Magenta
    "RESET": "\033[0m",
}

LOG_FORMAT = "%(levelname)s: %(message)s"


class ColorFormatter(logging.Formatter):
    def format(self, record):
        log_color = COLORS.get(record.levelname, COLORS["RESET"])
        log_message = super().format(record)
        return f"{log_color}{log_message}{COLORS['RESET']}"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a colored console handler to the root logger once."""
    root = logging.getLogger()
    if not any(getattr(handler, "_expo_summary", False) for handler in root.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColorFormatter(LOG_FORMAT))
        console_handler._expo_summary = True
        root.addHandler(console_handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    # Pillow logs every PNG chunk at DEBUG.
    logging.getLogger("PIL").setLevel(logging.INFO)
    return root


__all__ = ["configure_logging", "ColorFormatter"]
