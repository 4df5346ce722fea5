"""
Pretty output formatting for the CLI.

Every command prints through PrettyOutput so the run summary, column profiles
and sink delivery progress share one look.
"""

from colorama import Fore, Style
import os


class PrettyOutput:
    """
    Terminal formatter with colors, boxes and a small symbol set.

    All methods are static and print directly to stdout.
    """

    # Color scheme
    PRIMARY = Fore.CYAN
    SUCCESS = Fore.GREEN
    WARNING = Fore.YELLOW
    ERROR = Fore.RED
    INFO = Fore.BLUE
    HEADER = Fore.WHITE + Style.BRIGHT
    DIM = Style.DIM
    RESET = Style.RESET_ALL

    # Symbols
    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO_SYMBOL = "ℹ"

    @staticmethod
    def get_terminal_width():
        """Get terminal width, default to 80 if cannot determine."""
        try:
            return os.get_terminal_size().columns
        except OSError:
            return 80

    @staticmethod
    def banner():
        print(f"{PrettyOutput.PRIMARY}{PrettyOutput.HEADER}reconcile{PrettyOutput.RESET}"
              f" {PrettyOutput.DIM}tabular data reconciliation{PrettyOutput.RESET}\n")

    @staticmethod
    def header(text, width=None):
        """Print a major header with box drawing."""
        if width is None:
            width = min(PrettyOutput.get_terminal_width(), 80)

        padding = (width - len(text) - 2) // 2
        line = "═" * width

        print(f"\n{PrettyOutput.PRIMARY}╔{line}╗")
        print(f"║{' ' * padding}{text}{' ' * (width - len(text) - padding)}║")
        print(f"╚{line}╝{PrettyOutput.RESET}\n")

    @staticmethod
    def section(text, width=None):
        if width is None:
            width = min(PrettyOutput.get_terminal_width(), 80)

        line = "─" * width
        print(f"\n{PrettyOutput.HEADER}{line}")
        print(f"{PrettyOutput.ARROW} {text}")
        print(f"{line}{PrettyOutput.RESET}\n")

    @staticmethod
    def success(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.SUCCESS}{PrettyOutput.CHECK}{PrettyOutput.RESET} {message}")

    @staticmethod
    def error(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.ERROR}{PrettyOutput.CROSS}{PrettyOutput.RESET} {message}")

    @staticmethod
    def warning(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.WARNING}{PrettyOutput.WARN}{PrettyOutput.RESET} {message}")

    @staticmethod
    def info(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.INFO}{PrettyOutput.INFO_SYMBOL}{PrettyOutput.RESET} {message}")

    @staticmethod
    def item(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.DIM}{PrettyOutput.DOT}{PrettyOutput.RESET} {message}")

    @staticmethod
    def key_value(key, value, indent=0, value_color=None):
        """
        Print a key-value pair.

        Args:
            key: Key text
            value: Value text
            indent: Indentation level
            value_color: Optional color for value
        """
        spaces = " " * indent
        if value_color:
            print(f"{spaces}{PrettyOutput.DIM}{key}:{PrettyOutput.RESET} {value_color}{value}{PrettyOutput.RESET}")
        else:
            print(f"{spaces}{PrettyOutput.DIM}{key}:{PrettyOutput.RESET} {value}")

    @staticmethod
    def progress(current, total, message=""):
        """Print a one-line progress bar."""
        percentage = (current / total) * 100 if total > 0 else 0
        bar_length = 30
        filled = int(bar_length * current / total) if total > 0 else 0
        bar = "█" * filled + "░" * (bar_length - filled)

        print(f"  {PrettyOutput.PRIMARY}[{current}/{total}]{PrettyOutput.RESET} ", end="")
        print(f"{PrettyOutput.HEADER}{bar}{PrettyOutput.RESET} ", end="")
        print(f"{percentage:.0f}% {message}")

    @staticmethod
    def summary_box(title, items, width=None):
        """
        Print a summary box with items.

        Args:
            title: Box title
            items: List of (key, value, color) tuples
            width: Box width (default: 60)
        """
        if width is None:
            width = 60

        print(f"\n{PrettyOutput.PRIMARY}┌{'─' * (width - 2)}┐{PrettyOutput.RESET}")

        title_padding = (width - len(title) - 4) // 2
        print(f"{PrettyOutput.PRIMARY}│{PrettyOutput.RESET} {' ' * title_padding}{PrettyOutput.HEADER}{title}{PrettyOutput.RESET}{' ' * (width - len(title) - title_padding - 4)} {PrettyOutput.PRIMARY}│{PrettyOutput.RESET}")

        print(f"{PrettyOutput.PRIMARY}├{'─' * (width - 2)}┤{PrettyOutput.RESET}")

        for key, value, color in items:
            value_str = str(value)
            padding = max(width - len(key) - len(value_str) - 6, 1)
            print(f"{PrettyOutput.PRIMARY}│{PrettyOutput.RESET}  {PrettyOutput.DIM}{key}:{PrettyOutput.RESET}{' ' * padding}{color}{value_str}{PrettyOutput.RESET}  {PrettyOutput.PRIMARY}│{PrettyOutput.RESET}")

        print(f"{PrettyOutput.PRIMARY}└{'─' * (width - 2)}┘{PrettyOutput.RESET}\n")

    @staticmethod
    def blank_line():
        print()

    @staticmethod
    def output_file(label, path, indent=2):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.ARROW} {PrettyOutput.DIM}{label}:{PrettyOutput.RESET} {path}")

    @staticmethod
    def confidence_indicator(confidence, width=10):
        """
        Return a bar for a mapping confidence in [0, 1].

        Green at 0.8 and above (no review needed), yellow from 0.6, red below.
        """
        filled = int(round(width * confidence))
        if confidence >= 0.8:
            color = Fore.GREEN
        elif confidence >= 0.6:
            color = Fore.YELLOW
        else:
            color = Fore.RED
        bar = f"{color}{'█' * filled}{PrettyOutput.DIM}{'░' * (width - filled)}{PrettyOutput.RESET}"
        return f"{bar} {confidence * 100:.0f}%"

    @staticmethod
    def run_result(errors=0, warnings=0, duration=None):
        """Print the one-line verdict of a reconciliation run."""
        if errors == 0 and warnings == 0:
            status = f"{PrettyOutput.SUCCESS}{PrettyOutput.CHECK} IMPORT READY{PrettyOutput.RESET}"
        elif errors > 0:
            status = f"{PrettyOutput.ERROR}{PrettyOutput.CROSS} NEEDS REVIEW{PrettyOutput.RESET}"
        else:
            status = f"{PrettyOutput.WARNING}{PrettyOutput.WARN} WARNINGS{PrettyOutput.RESET}"

        parts = [status]
        if errors > 0:
            parts.append(f"{PrettyOutput.ERROR}{errors} unresolved errors{PrettyOutput.RESET}")
        if warnings > 0:
            parts.append(f"{PrettyOutput.WARNING}{warnings} warnings{PrettyOutput.RESET}")
        if duration:
            parts.append(f"{PrettyOutput.DIM}{duration:.1f}s{PrettyOutput.RESET}")

        print(f"\n{'  │  '.join(parts)}")

    @staticmethod
    def compact_table(headers, rows, col_widths=None):
        """
        Print a compact table.

        Args:
            headers: List of header strings
            rows: List of row tuples
            col_widths: Optional list of column widths
        """
        if not col_widths:
            col_widths = [max(len(str(h)), max(len(str(r[i])) for r in rows) if rows else 0)
                          for i, h in enumerate(headers)]

        header_str = "  ".join(f"{h:<{col_widths[i]}}" for i, h in enumerate(headers))
        print(f"  {PrettyOutput.HEADER}{header_str}{PrettyOutput.RESET}")
        print(f"  {PrettyOutput.DIM}{'─' * len(header_str)}{PrettyOutput.RESET}")

        for row in rows:
            row_str = "  ".join(f"{str(v):<{col_widths[i]}}" for i, v in enumerate(row))
            print(f"  {row_str}")
