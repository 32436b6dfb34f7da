"""
CORS for the procurement admin consoles calling the options API.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings
from shared.infrastructure.correlation import REQUEST_ID_HEADER

# Local admin console dev servers, used when ALLOWED_ORIGINS is empty
LOCAL_ORIGINS = tuple(
    f"http://{host}:{port}" for host in ("localhost", "127.0.0.1") for port in (3000, 5173)
)


def allowed_origins() -> list[str]:
    configured = [o.strip() for o in settings.allowed_origins.split(",")]
    return [o for o in configured if o] or list(LOCAL_ORIGINS)


def configure_cors(app: FastAPI) -> None:
    """Attach CORSMiddleware. Preflight responses are cached outside development."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Accept-Language", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=0 if settings.environment == "development" else 600,
    )
