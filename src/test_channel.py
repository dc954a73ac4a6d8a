import pytest

from certpin import constants
from certpin.channel import MethodCallHandler
from certpin.exceptions import MalformedRequest, MethodNotImplemented
from conftest import DOMAIN, NOW, to_der

CONFIG = {"defaults": {"policy": constants.POLICY_STRICT_HOSTNAME}, "outputs": []}


def _arguments(leaf_der, root_pem, **kwargs) -> dict:
    arguments = {"serverCert": leaf_der, "trustedRoot": root_pem, "domain": DOMAIN}
    arguments.update(kwargs)
    return arguments


def test_validate_certificate(leaf_der, root_pem):
    handler = MethodCallHandler(CONFIG)
    assert handler.channel_name == "com.navigate.kas/certificate_validator"
    assert handler.handle("validateCertificate", _arguments(leaf_der, root_pem), now=NOW) is True


def test_typed_data_arguments(leaf_der, root_pem):
    handler = MethodCallHandler(CONFIG)
    arguments = _arguments(bytearray(leaf_der), root_pem)
    assert handler.handle("validateCertificate", arguments, now=NOW) is True
    arguments = _arguments(memoryview(leaf_der), root_pem)
    assert handler.handle("validateCertificate", arguments, now=NOW) is True


def test_default_policy_from_config(leaf_der, root_pem):
    arguments = _arguments(leaf_der, root_pem, domain="other.example.org")
    strict = MethodCallHandler(CONFIG)
    assert strict.handle("validateCertificate", dict(arguments), now=NOW) is False
    chain_only = MethodCallHandler(
        {"defaults": {"policy": constants.POLICY_CHAIN_ONLY}, "outputs": []}
    )
    assert chain_only.handle("validateCertificate", dict(arguments), now=NOW) is True
    arguments["policy"] = constants.POLICY_STRICT_HOSTNAME
    assert chain_only.handle("validateCertificate", dict(arguments), now=NOW) is False


def test_intermediates_argument(chained_leaf_cert, intermediate_cert, root_pem):
    handler = MethodCallHandler(CONFIG)
    arguments = _arguments(
        to_der(chained_leaf_cert),
        root_pem,
        intermediates=[bytearray(to_der(intermediate_cert))],
    )
    assert handler.handle("validateCertificate", arguments, now=NOW) is True


def test_handle_verbose(leaf_der, root_pem):
    handler = MethodCallHandler(CONFIG)
    reply = handler.handle_verbose(
        "validateCertificate",
        _arguments(leaf_der, root_pem, domain="other.example.org"),
        now=NOW,
    )
    assert reply["valid"] is False
    assert reply["step"] == constants.STEP_HOSTNAME


def test_unknown_method(leaf_der, root_pem):
    handler = MethodCallHandler(CONFIG)
    with pytest.raises(MethodNotImplemented):
        handler.handle("getPlatformVersion", _arguments(leaf_der, root_pem))
    with pytest.raises(NotImplementedError):
        handler.handle_verbose("getPlatformVersion", _arguments(leaf_der, root_pem))


@pytest.mark.parametrize(
    "arguments",
    [
        None,
        [],
        {"trustedRoot": "abc", "domain": DOMAIN},
        {"serverCert": "abc", "trustedRoot": "abc", "domain": DOMAIN},
        {"serverCert": b"abc", "trustedRoot": b"abc", "domain": DOMAIN},
        {"serverCert": b"abc", "trustedRoot": "abc", "domain": 1},
    ],
)
def test_invalid_arguments(arguments):
    handler = MethodCallHandler(CONFIG)
    with pytest.raises(MalformedRequest) as excinfo:
        handler.handle("validateCertificate", arguments)
    reply = handler.error_reply(excinfo.value)
    assert reply["code"] == "INVALID_ARGUMENTS"
    assert reply["message"] == "Missing or invalid arguments"
    assert reply["details"]


def test_invalid_root_is_false_not_error(leaf_der):
    handler = MethodCallHandler(CONFIG)
    assert handler.handle("validateCertificate", _arguments(leaf_der, "@@@"), now=NOW) is False
