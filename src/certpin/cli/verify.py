import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Union

from rich.console import Console
from rich.markup import escape

from . import failln, infoln, passln, warnln
from .. import constants, util, validator
from ..exceptions import MalformedRequest
from ..models import parse_request

__module__ = "certpin.cli.verify"

logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_MALFORMED = 2


def _read_file(file_path: str, label: str) -> bytes:
    chk_path = Path(file_path)
    if not chk_path.is_file():
        raise MalformedRequest(details=[f"{label} {file_path} is not a file"])
    return chk_path.read_bytes()


def parse_time(value: Union[str, None]) -> Union[datetime, None]:
    if not value:
        return None
    try:
        return util.as_utc(datetime.fromisoformat(value))
    except ValueError as err:
        raise MalformedRequest(details=[f"--at {value} is not an ISO 8601 time"]) from err


def verify(
    config: dict,
    server_cert_path: str,
    trusted_root_path: str,
    domain: str,
    policy: Union[str, None] = None,
    intermediate_paths: Union[list[str], None] = None,
    at: Union[str, None] = None,
    as_json: bool = False,
    console: Union[Console, None] = None,
) -> int:
    use_icons = any(
        n.get("type") == "console" and n.get("use_icons")
        for n in config.get("outputs", [])
    )
    as_json = as_json or any(n.get("type") == "json" for n in config.get("outputs", []))
    try:
        request = parse_request(
            {
                "server_cert": util.pem_or_der_to_der(
                    _read_file(server_cert_path, "server certificate")
                ),
                "trusted_root": util.force_str(
                    _read_file(trusted_root_path, "trusted root")
                ),
                "domain": domain,
                "policy": policy or config["defaults"]["policy"],
                "intermediates": [
                    util.pem_or_der_to_der(_read_file(file_path, "intermediate"))
                    for file_path in intermediate_paths or []
                ],
            }
        )
        now = parse_time(at)
    except (MalformedRequest, ValueError) as err:
        details = getattr(err, "details", None) or [str(err)]
        logger.debug(details)
        if as_json and console:
            console.print_json(
                json.dumps({"code": MalformedRequest.code, "details": details})
            )
        for detail in details:
            failln(
                escape(detail),
                result_text="INVALID",
                con=None if as_json else console,
                use_icons=use_icons,
            )
        return EXIT_MALFORMED

    infoln(
        f"pinning {escape(server_cert_path)} to {escape(trusted_root_path)}",
        result_text=request.policy.value.upper(),
        domain=domain,
        con=None if as_json else console,
        use_icons=use_icons,
    )
    if request.policy.value == constants.POLICY_CHAIN_ONLY:
        warnln(
            "certificate names are not checked",
            domain=domain,
            con=None if as_json else console,
            use_icons=use_icons,
        )
    result = validator.evaluate(request, now=now)
    validator.to_boolean(result, domain)
    if as_json:
        if console:
            console.print_json(json.dumps(result.to_dict()))
    elif result.valid:
        passln(
            "certificate is anchored to the pinned root",
            domain=domain,
            con=console,
            use_icons=use_icons,
        )
    else:
        failln(
            escape(result.diagnostic or ""),
            result_label=result.step,
            domain=domain,
            con=console,
            use_icons=use_icons,
        )
    return EXIT_VALID if result.valid else EXIT_INVALID
