from typing import Literal, Optional

__all__ = [
    "colorize_text",
    "mask_secret",
]


def colorize_text(
        text: str,
        color: Literal[
            "red", "green", "yellow", "orange", "cyan", "light_grey", "bright_grey", "bright_red", "reset"
        ] = "reset"
) -> str:
    """
    Colorize text for terminal output

    Args:
        text (str): Text to colorize
        color (str): Color name

    Returns:
        str: Colorized text
    """
    color_codes = {
        "red": "\033[31m",
        "green": "\033[32m",
        "yellow": "\033[33m",
        "orange": "\033[38;5;208m",
        "cyan": "\033[36m",
        "bright_grey": "\033[97m",
        "light_grey": "\033[37m",
        "bright_red": "\033[91m",
        "reset": "\033[0m",
    }
    color_prefix = color_codes.get(color, '')
    color_suffix = color_codes['reset']
    return f"{color_prefix}{text}{color_suffix}"


def mask_secret(value: Optional[str], visible: int = 10) -> str:
    """
    Shorten a token for log output.

    Keeps the first ``visible`` characters and replaces the rest with an
    ellipsis, so log lines can tell tokens apart without leaking them.
    """
    if not value:
        return "<none>"
    if len(value) <= visible:
        return "***"
    return f"{value[:visible]}..."
