"""
Banner display for the Byzer shell.

Shows the logo and the engine version information.
"""

from typing import Any, Dict, Optional

try:
    from rich.console import Console
    from rich.text import Text
    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False

from ..utils.shared_io import SharedIO

LOGO = r"""
 _                                                 _              _   _
| |__    _   _   ____   ___   _ __           ___  | |__     ___  | | | |
| '_ \  | | | | |_  /  / _ \ | '__|  _____  / __| | '_ \   / _ \ | | | |
| |_) | | |_| |  / /  |  __/ | |    |_____| \__ \ | | | | |  __/ | | | |
|_.__/   \__/ | /___|  \___| |_|            |___/ |_| |_|  \___| |_| |_|
         |___/
"""

VERSION_FIELDS = ("version", "buildBy", "date", "srcChecksum", "revision", "branch", "url", "core")

EXIT_HINT = 'Type "CTRL-C" or "CTRL-D" to exit the program.'


def show_banner(
    version_info: Optional[Dict[str, Any]] = None,
    io: Optional[SharedIO] = None,
    use_rich: bool = True,
):
    """
    Display the Byzer shell banner.

    Args:
        version_info: Engine version row as returned by '!show version;'
        io: Channel to write to
        use_rich: Whether to use rich formatting (if available)
    """
    io = io or SharedIO()

    if RICH_AVAILABLE and use_rich:
        console = Console(file=io, highlight=False)
        console.print("Successfully Initialization...\n", style="green")
        console.print(LOGO, style="cyan bold", markup=False)

        if version_info:
            info = Text()
            for field in VERSION_FIELDS:
                info.append(f"{field}: ", style="dim")
                info.append(f"{version_info.get(field, '')}\n", style="green")
            console.print(info)

        console.print(EXIT_HINT, style="dim italic cyan", markup=False)
        console.print()
    else:
        # Fallback to plain text
        io.write("Successfully Initialization...\n\n")
        io.write(LOGO + "\n")
        if version_info:
            for field in VERSION_FIELDS:
                io.write(f"{field}: {version_info.get(field, '')}\n")
        io.write(f"\n{EXIT_HINT}\n\n")
