"""
Options API main application.
Entry point for the FastAPI server.
"""

from fastapi import FastAPI

from shared.config.settings import settings
from options_api.core import configure_cors, lifespan, register_middlewares
from options_api.routers import health_router, register_option_routers


app = FastAPI(
    title="eProcurement Options API",
    description="Reference option tables with soft and hard delete lifecycle",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)

app.include_router(health_router)
register_option_routers(app)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "options_api.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=settings.debug,
    )
