"""
Credential classification.

Callers post whatever Google handed their client: the implicit/popup flow
yields an OAuth access token, One-Tap and native SDKs yield an ID token. The
two are told apart by shape alone.

Known fragility: Google access tokens currently start with ``ya29.``. This is
an observed convention of Google's token format, not a documented grammar.
If Google changes it, access tokens will be routed to ID token verification
and rejected there (fail closed, never accepted by mistake).
"""

import enum


ACCESS_TOKEN_PREFIX = "ya29."


class CredentialKind(enum.Enum):
    ACCESS_TOKEN = "access_token"
    ID_TOKEN = "id_token"


def classify_credential(raw: str) -> CredentialKind:
    """
    Decide which verification path a raw credential takes.

    Total and deterministic: anything not carrying the access-token prefix
    is treated as an ID token.
    """
    if raw.startswith(ACCESS_TOKEN_PREFIX):
        return CredentialKind.ACCESS_TOKEN
    return CredentialKind.ID_TOKEN
