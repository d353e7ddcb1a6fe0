"""Keycloak OIDC provider for bearer token introspection."""

import logging
from dataclasses import dataclass, field

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass
class OIDCUser:
    """Authenticated caller from an active token."""

    user_id: int
    email: str | None = None
    username: str | None = None
    realm_roles: list[str] = field(default_factory=list)


def user_id_from_claims(claims: dict) -> int | None:
    """Numeric HR user id: the user_id claim mapper, else a numeric sub."""
    raw = claims.get("user_id", claims.get("sub"))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class KeycloakProvider:
    """Keycloak OIDC - introspects tokens and extracts the HR user id."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )

    def decode_token(self, token: str) -> OIDCUser | None:
        """Introspect token, return user info or None when it is not usable."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as e:
            logger.warning("Token introspection failed: %s", e)
            return None
        if not token_info.get("active"):
            return None
        user_id = user_id_from_claims(token_info)
        if user_id is None:
            logger.warning("Active token without a numeric user id (sub=%s)", token_info.get("sub"))
            return None
        return OIDCUser(
            user_id=user_id,
            email=token_info.get("email"),
            username=token_info.get("preferred_username"),
            realm_roles=token_info.get("realm_access", {}).get("roles", []),
        )
