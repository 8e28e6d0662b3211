import asyncio
import inspect
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from openai import AsyncOpenAI

from routes.mcp_route import router as mcp_router
from services.openai.interpreter import InstructionInterpreter, KeywordInterpreter
from services.openai.openai_interpreter import OpenAIInterpreter
from services.protocol.dispatcher import ProtocolDispatcher
from services.toolsets.factory import create_toolset
from services.toolsets.toolset import ToolSet
from services.transport.sse_transport import SSETransport
from utils.session_cleaner import SessionCleaner
from utils.settings import ServerSettings

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def build_interpreter(settings: ServerSettings, client: Optional[AsyncOpenAI]) -> InstructionInterpreter:
    """Pick the instruction interpreter for the NL-automation tool-set."""
    if settings.interpreter == "openai":
        return OpenAIInterpreter(client, model=settings.openai_model)
    return KeywordInterpreter()


async def close_client(client) -> None:
    """Close the OpenAI client if it exposes a close/aclose method."""
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception as exc:
        LOGGER.warning("Failed to close OpenAI client cleanly: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the selected tool-set (session store + tool registry)
      - the protocol dispatcher and SSE transport
      - the OpenAI async client, when the OpenAI interpreter is configured
      - the optional periodic session sweep
    and attach them to `app.state`.
    """
    settings: ServerSettings = getattr(app.state, "settings", None) or ServerSettings.from_env()
    configure_logging(settings.log_level)
    app.state.settings = settings

    # A shared client is only built when the server holds its own key;
    # otherwise each call uses the key supplied by the caller.
    openai_client: Optional[AsyncOpenAI] = None
    if settings.interpreter == "openai" and os.getenv("OPENAI_API_KEY"):
        try:
            openai_client = AsyncOpenAI()
        except Exception as exc:
            raise RuntimeError("Failed to initialize OpenAI Async client") from exc
    app.state.openai_client = openai_client

    toolset: Optional[ToolSet] = getattr(app.state, "toolset", None)
    if toolset is None:
        toolset = create_toolset(settings, interpreter=build_interpreter(settings, openai_client))
    app.state.toolset = toolset

    dispatcher = ProtocolDispatcher(toolset.info, toolset.registry)
    app.state.transport = SSETransport(dispatcher, heartbeat_seconds=settings.heartbeat_seconds)

    cleanup_task: Optional[asyncio.Task] = None
    if settings.sweep_interval_seconds:
        cleaner = SessionCleaner(toolset.store)
        cleanup_task = asyncio.create_task(cleaner.run_periodic_cleanup(settings.sweep_interval_seconds))

    LOGGER.info("%s v%s ready (%s)", toolset.info.name, toolset.info.version, toolset.slug)
    try:
        yield
    finally:
        if cleanup_task is not None:
            cleanup_task.cancel()
            await asyncio.gather(cleanup_task, return_exceptions=True)
        if app.state.openai_client is not None:
            await close_client(app.state.openai_client)


def create_app(settings: Optional[ServerSettings] = None, toolset: Optional[ToolSet] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    `settings` and `toolset` default to what the environment describes; tests
    pass their own.
    """
    app = FastAPI(lifespan=lifespan, title="MCP Tool-set Server")
    app.state.settings = settings
    app.state.toolset = toolset

    # Register application routers
    app.include_router(mcp_router)

    return app


app = create_app()
