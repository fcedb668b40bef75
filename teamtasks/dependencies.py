from typing import Any, Dict, Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from teamtasks.database import get_db
from teamtasks.errors import AuthenticationError, ForbiddenError
from teamtasks.store import EntityStore
from teamtasks.utils.auth import CredentialVerifier

logger = structlog.get_logger(__name__)


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.verifier


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return None


class AuthGate:
    """Per-route bearer token check.

    Which claims a route needs comes from ``Settings.route_policy``; an open
    route lets every request through with no claims. On success the decoded
    claims are stored on ``request.state.claims`` and returned to the handler.
    """

    def __init__(self, route: str):
        self.route = route

    def __call__(
        self,
        request: Request,
        authorization: Optional[str] = Header(None),
    ) -> Optional[Dict[str, Any]]:
        policy = request.app.state.settings.route_policy(self.route)
        if policy is None:
            request.state.claims = None
            return None

        token = _extract_token(authorization)
        if not token:
            logger.info("auth.gate.rejected", route=self.route, reason="missing token")
            raise AuthenticationError("userToken is required for authorization")

        verifier: CredentialVerifier = request.app.state.verifier
        try:
            claims = verifier.verify_token(token)
        except AuthenticationError as exc:
            logger.info("auth.gate.rejected", route=self.route, reason=exc.message)
            raise

        # authenticated but not allowed on this route: 403, per Settings.route_policy
        for name, expected in policy.items():
            if claims.get(name) != expected:
                logger.info("auth.gate.forbidden", route=self.route, claim=name)
                raise ForbiddenError(f"Token is missing the required {name} claim")

        request.state.claims = claims
        return claims
