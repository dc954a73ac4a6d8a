"""Verification policies.

``ChainOnly`` checks the signature chain up to the pinned root and the
validity windows, nothing else. Use it when the connection target (a raw IP
for example) differs from the name in the certificate and the name binding is
already given by the pin itself.

``StrictHostname`` runs the same checks and additionally requires the domain
to match the certificate subjectAltName (or the legacy commonName when the
certificate carries no dNSName at all).
"""
from dataclasses import dataclass
from typing import ClassVar, Union

from . import constants
from .exceptions import MalformedRequest

__module__ = "certpin.policy"


@dataclass(frozen=True)
class ChainOnly:
    name: ClassVar[str] = constants.POLICY_CHAIN_ONLY
    checks_hostname: ClassVar[bool] = False


@dataclass(frozen=True)
class StrictHostname:
    domain: str
    name: ClassVar[str] = constants.POLICY_STRICT_HOSTNAME
    checks_hostname: ClassVar[bool] = True


ValidationPolicy = Union[ChainOnly, StrictHostname]


def select_policy(name: str, domain: str) -> ValidationPolicy:
    name = getattr(name, "value", name)
    if name == constants.POLICY_CHAIN_ONLY:
        return ChainOnly()
    if name == constants.POLICY_STRICT_HOSTNAME:
        if not isinstance(domain, str):
            raise MalformedRequest(
                f"provided an invalid type {type(domain)} for domain, expected str"
            )
        return StrictHostname(domain=domain)
    raise MalformedRequest(
        f"unknown policy {name}, expected one of {', '.join(constants.POLICIES)}"
    )
