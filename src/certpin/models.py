from enum import Enum
from dataclasses import dataclass, asdict
from typing import Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBytes,
    StrictStr,
    ValidationError as PydanticValidationError,
)

from . import constants
from .exceptions import MalformedRequest, ValidationFailure

__module__ = "certpin.models"


class PolicyName(str, Enum):
    CHAIN_ONLY = constants.POLICY_CHAIN_ONLY
    STRICT_HOSTNAME = constants.POLICY_STRICT_HOSTNAME


class ValidationRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    server_cert: StrictBytes = Field(
        alias="serverCert", description="DER encoded certificate the server presented"
    )
    trusted_root: StrictStr = Field(
        alias="trustedRoot",
        description="PEM armored or bare base64 root certificate to pin to",
    )
    domain: StrictStr = Field(description="Domain the connection is meant for")
    policy: PolicyName = Field(default=PolicyName(constants.DEFAULT_POLICY))
    intermediates: list[StrictBytes] = Field(
        default_factory=list,
        description="Untrusted DER encoded certificates between the server certificate and the pinned root",
    )


def parse_request(arguments: Union[dict, None]) -> ValidationRequest:
    if not isinstance(arguments, dict):
        raise MalformedRequest(
            details=[f"arguments of type {type(arguments)} not supported, dict expected"]
        )
    try:
        return ValidationRequest.model_validate(arguments)
    except PydanticValidationError as err:
        raise MalformedRequest(
            details=[
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in err.errors()
            ]
        ) from err


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    diagnostic: Union[str, None] = None
    step: Union[str, None] = None
    openssl_errno: Union[int, None] = None

    @classmethod
    def failure(cls, err: ValidationFailure) -> "ValidationResult":
        return cls(
            valid=False,
            diagnostic=str(err),
            step=err.step,
            openssl_errno=getattr(err, "openssl_errno", None),
        )

    def to_dict(self) -> dict:
        return asdict(self)
