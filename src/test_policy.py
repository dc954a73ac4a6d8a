import dataclasses

import pytest
from OpenSSL.crypto import X509Store

from certpin import constants
from certpin.anchors import TrustAnchorSet
from certpin.certificate import RootCertificate, ServerCertificate
from certpin.exceptions import MalformedRequest
from certpin.models import PolicyName
from certpin.policy import ChainOnly, StrictHostname, select_policy
from conftest import DOMAIN, NOW, to_der


def test_select_chain_only():
    policy = select_policy(constants.POLICY_CHAIN_ONLY, DOMAIN)
    assert isinstance(policy, ChainOnly)
    assert policy.checks_hostname is False


def test_select_strict_hostname():
    policy = select_policy(PolicyName.STRICT_HOSTNAME, DOMAIN)
    assert isinstance(policy, StrictHostname)
    assert policy.domain == DOMAIN
    assert policy.checks_hostname is True


def test_policies_are_frozen():
    policy = StrictHostname(domain=DOMAIN)
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.domain = "other.example.com"


def test_select_unknown():
    with pytest.raises(MalformedRequest):
        select_policy("relaxed", DOMAIN)
    with pytest.raises(MalformedRequest):
        select_policy(constants.POLICY_STRICT_HOSTNAME, None)


class TestTrustAnchorSet:
    def test_single_anchor(self, root_cert):
        root = RootCertificate(to_der(root_cert))
        anchors = TrustAnchorSet(root)
        assert anchors.root is root
        assert len(anchors) == 1
        assert list(anchors) == [root]
        assert root in anchors

    def test_rejects_other_types(self, root_cert, leaf_cert):
        with pytest.raises(TypeError):
            TrustAnchorSet(to_der(root_cert))
        with pytest.raises(TypeError):
            TrustAnchorSet(ServerCertificate(to_der(leaf_cert)))

    def test_other_certificate_not_contained(self, root_cert, other_root_cert):
        anchors = TrustAnchorSet(RootCertificate(to_der(root_cert)))
        assert RootCertificate(to_der(other_root_cert)) not in anchors

    def test_build_store(self, root_cert):
        anchors = TrustAnchorSet(RootCertificate(to_der(root_cert)))
        assert isinstance(anchors.build_store(NOW), X509Store)
