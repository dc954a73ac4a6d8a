"""Method call boundary for hosts that reach the validator through a message
channel. The transport itself belongs to the host, this module only decodes
the call, runs the validation and encodes the answer.
"""
import logging
from datetime import datetime
from typing import Any, Union

from . import constants, validator
from .config import get_config
from .exceptions import MalformedRequest, MethodNotImplemented
from .models import ValidationRequest, parse_request

__module__ = "certpin.channel"

logger = logging.getLogger(__name__)

BYTES_ARGUMENTS = ["serverCert", "server_cert"]


def _as_bytes(value: Any) -> Any:
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


class MethodCallHandler:
    channel_name: str = constants.CHANNEL_NAME
    default_policy: str

    def __init__(self, config: Union[dict, None] = None) -> None:
        config = config or get_config()
        self.default_policy = config["defaults"].get("policy", constants.DEFAULT_POLICY)

    def parse_arguments(self, arguments: Union[dict, None]) -> ValidationRequest:
        if not isinstance(arguments, dict):
            raise MalformedRequest(
                details=[
                    f"arguments of type {type(arguments)} not supported, dict expected"
                ]
            )
        arguments = {
            key: _as_bytes(value) if key in BYTES_ARGUMENTS else value
            for key, value in arguments.items()
        }
        if isinstance(arguments.get("intermediates"), list):
            arguments["intermediates"] = [
                _as_bytes(value) for value in arguments["intermediates"]
            ]
        arguments.setdefault("policy", self.default_policy)
        return parse_request(arguments)

    def handle(
        self, method: str, arguments: Union[dict, None], now: datetime = None
    ) -> bool:
        if method != constants.METHOD_VALIDATE_CERTIFICATE:
            raise MethodNotImplemented(method)
        request = self.parse_arguments(arguments)
        return validator.validate_request(request, now=now)

    def handle_verbose(
        self, method: str, arguments: Union[dict, None], now: datetime = None
    ) -> dict:
        if method != constants.METHOD_VALIDATE_CERTIFICATE:
            raise MethodNotImplemented(method)
        request = self.parse_arguments(arguments)
        result = validator.evaluate(request, now=now)
        validator.to_boolean(result, request.domain)
        return result.to_dict()

    def error_reply(self, err: MalformedRequest) -> dict:
        return {"code": err.code, "message": err.message, "details": err.details}
