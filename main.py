import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from attachments_inspector.config import settings
from attachments_inspector.exception_handlers import register_exception_handlers
from attachments_inspector.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from attachments_inspector.plugins.lifecycle import PluginActivator, PluginDeactivator
from attachments_inspector.plugins.loader import load_plugins
from attachments_inspector.plugins.registry import PluginRegistry
from attachments_inspector.routes import frontend
from attachments_inspector.routes.endpoints import EndpointRegistry
from attachments_inspector.services.email_service import EmailService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Activate the plugin on startup and deactivate it on shutdown."""
    logger.info("Starting up the application...")
    # SMTP is blocking; keep it off the event loop
    await asyncio.to_thread(
        PluginActivator.activate, app.state.plugin_registry, app.state.endpoint_registry, app.state.mailer
    )
    yield
    logger.info("Shutting down the application...")
    await asyncio.to_thread(
        PluginDeactivator.deactivate, app.state.plugin_registry, app.state.endpoint_registry, app.state.mailer
    )


def create_app(
    plugins: PluginRegistry | None = None,
    endpoints: EndpointRegistry | None = None,
    mailer: EmailService | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        plugins: Component registry; defaults to the components enabled in
            the plugins config file.
        endpoints: REST endpoint table; defaults to an empty table under
            ``settings.api_namespace``.
        mailer: Lifecycle notification sender.
    """
    if plugins is None:
        plugins = load_plugins(PluginRegistry())
    if endpoints is None:
        endpoints = EndpointRegistry(settings.api_namespace)
    endpoints.extend(plugins.endpoint_specs())

    app = FastAPI(
        title=settings.app_name,
        description="Attachment metadata for posts: attachments report and editor attachments panel",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.plugin_registry = plugins
    app.state.endpoint_registry = endpoints
    app.state.mailer = mailer or EmailService()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(StructuredLoggingMiddleware)

    register_exception_handlers(app)

    endpoints.mount(app)
    app.include_router(frontend.router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.app_version, "active": plugins.is_active}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return app


setup_structured_logging(settings.log_level, json_format=settings.log_json)
app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
