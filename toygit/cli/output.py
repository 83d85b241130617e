"""CLI output utilities and formatting."""

from colorama import Fore, Style


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def highlight_hash(hash: str) -> str:
    """Format an object hash in yellow."""
    return f"{Fore.YELLOW}{hash}{Style.RESET_ALL}"
