import logging
from pathlib import Path
from typing import Union

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import failln
from .. import constants, util
from ..certificate import BaseCertificate
from ..exceptions import CertificateFormatError

__module__ = "certpin.cli.info"

logger = logging.getLogger(__name__)


def _value(value) -> str:
    if isinstance(value, list):
        return "\n".join(str(v) for v in value) or "-"
    if value is None:
        return "-"
    return str(value)


def info(cert_files: list[str], console: Union[Console, None] = None) -> int:
    failures = 0
    for cert_file in cert_files:
        chk_path = Path(cert_file)
        if not chk_path.is_file():
            failln(f"not a file {escape(cert_file)}", con=console)
            failures += 1
            continue
        try:
            cert = BaseCertificate(util.pem_or_der_to_der(chk_path.read_bytes()))
        except (CertificateFormatError, ValueError) as err:
            logger.debug(err, exc_info=True)
            failln(escape(str(err)), aside=escape(cert_file), con=console)
            failures += 1
            continue
        if not isinstance(console, Console):
            continue
        table = Table(title=escape(cert_file))
        table.add_column(
            "Property", justify="right", style=constants.CLI_COLOR_PRIMARY, no_wrap=True
        )
        table.add_column("Value")
        for key, value in cert.to_dict().items():
            if key == "type":
                continue
            table.add_row(key, escape(_value(value)))
        table.add_row("valid_now", str(cert.valid_at(util.utcnow())))
        table.add_row("expiry_status", cert.expiry_status())
        console.print(table)
    return 1 if failures else 0
