from typing import Union

from rich.console import Console
from rich.table import Table

from .. import constants


def outputln(
    message: str,
    result_level: str = constants.RESULT_LEVEL_INFO,
    con: Union[Console, None] = None,
    result_text: str = None,
    result_label: str = "",
    domain: str = None,
    aside: str = "",
    use_icons: bool = False,
):
    """Print one result line, the level tag and message on the left, the
    failed step and domain dimmed on the right.
    """
    if not isinstance(con, Console) or result_level not in constants.DEFAULT_MAP:
        return
    color = constants.CLI_COLOR_MAP[result_level]
    tag = f"[{color}]{result_text or constants.DEFAULT_MAP[result_level]}[/{color}]"
    if use_icons:
        tag = f"{constants.CLI_ICON_MAP[result_level]} {tag}"
    right = " ".join(part for part in [result_label, aside, domain] if part)

    table = Table.grid(expand=True)
    table.add_column()
    table.add_column(justify="right", style="dim", no_wrap=True, overflow=None)
    table.add_row(f"{tag} {message}", right)
    con.print(table)


def infoln(message: str, con: Union[Console, None] = None, **kwargs):
    outputln(message, constants.RESULT_LEVEL_INFO, con=con, **kwargs)


def failln(message: str, con: Union[Console, None] = None, **kwargs):
    outputln(message, constants.RESULT_LEVEL_FAIL, con=con, **kwargs)


def passln(message: str, con: Union[Console, None] = None, **kwargs):
    outputln(message, constants.RESULT_LEVEL_PASS, con=con, **kwargs)


def warnln(message: str, con: Union[Console, None] = None, **kwargs):
    outputln(message, constants.RESULT_LEVEL_WARN, con=con, **kwargs)
