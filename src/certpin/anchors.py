import logging
from datetime import datetime

from OpenSSL.crypto import X509Store, X509StoreFlags

from . import util
from .certificate import RootCertificate

__module__ = "certpin.anchors"

logger = logging.getLogger(__name__)


class TrustAnchorSet:
    """Exactly one caller supplied root, never the platform trust store.

    A second anchor can not be added, and stores built from this set never
    load default verify paths.
    """

    _root: RootCertificate

    def __init__(self, root: RootCertificate) -> None:
        if not isinstance(root, RootCertificate):
            raise TypeError(
                f"provided an invalid type {type(root)} for root, expected RootCertificate"
            )
        self._root = root

    @property
    def root(self) -> RootCertificate:
        return self._root

    def __len__(self) -> int:
        return 1

    def __iter__(self):
        yield self._root

    def __contains__(self, certificate) -> bool:
        return certificate == self._root

    def build_store(self, verification_time: datetime) -> X509Store:
        store = X509Store()
        store.add_cert(self._root.x509)
        store.set_time(util.as_utc(verification_time))
        # the pinned root terminates the path even when it is not self-signed
        store.set_flags(X509StoreFlags.PARTIAL_CHAIN)
        logger.debug(
            f"anchor-only store built for {self._root.subject} at {verification_time.isoformat()}"
        )
        return store
