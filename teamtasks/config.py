import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_SECRET_KEY = "TU_SECRET_KEY_TEMPORAL"
DEFAULT_OPEN_ROUTES = frozenset({"tags.create", "reports.pending"})


def _split_routes(raw: str) -> frozenset:
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once and handed to the app factory."""

    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: float = 60
    # Default to local SQLite for dev; override via env in Docker/Prod
    database_url: str = "sqlite:///./teamtasks.db"
    bcrypt_rounds: int = 10
    log_level: str = "INFO"
    open_routes: frozenset = field(default_factory=lambda: DEFAULT_OPEN_ROUTES)
    required_role: str = "user"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        open_routes = env.get("OPEN_ROUTES")
        return cls(
            secret_key=env.get("SECRET_KEY", env.get("JWT_SECRET", DEFAULT_SECRET_KEY)),
            algorithm=env.get("ALGORITHM", "HS256"),
            access_token_expire_minutes=float(env.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60)),
            database_url=env.get("DATABASE_URL", "sqlite:///./teamtasks.db"),
            bcrypt_rounds=int(env.get("BCRYPT_ROUNDS", 10)),
            log_level=env.get("LOG_LEVEL", "INFO"),
            open_routes=DEFAULT_OPEN_ROUTES if open_routes is None else _split_routes(open_routes),
            required_role=env.get("REQUIRED_ROLE", "user"),
        )

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == DEFAULT_SECRET_KEY

    def route_policy(self, route: str) -> Optional[Mapping[str, str]]:
        """Return the claims a token must carry for ``route``.

        ``None`` means the route is open and no token is checked. Routes that
        are not listed as open are guarded, including names this object has
        never heard of.
        """
        if route in self.open_routes:
            return None
        return {"role": self.required_role}
