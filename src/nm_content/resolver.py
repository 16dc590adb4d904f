"""Content locator resolution — pure string rewriting, no I/O, never fails."""

import re

from config.settings import settings

IPFS_SCHEME = "ipfs://"

# CIDv0 ("Qm...") and base32 CIDv1 ("bafy...") prefixes
_BARE_CID = re.compile(r"^(Qm|bafy)")


def resolve(locator: str, gateway: str | None = None) -> str:
    """Map a content locator to a fetchable HTTP URL.

    ""               -> ""
    "ipfs://<cid>"   -> "<gateway><cid>"
    "<cid>"          -> "<gateway><cid>"   (bare Qm.../bafy... identifier)
    anything else    -> unchanged
    """
    if not locator:
        return ""
    base = gateway if gateway is not None else settings.IPFS_GATEWAY
    if locator.startswith(IPFS_SCHEME):
        return f"{base}{locator[len(IPFS_SCHEME):]}"
    if _BARE_CID.match(locator):
        return f"{base}{locator}"
    return locator
