"""FastAPI routes for the MCP SSE endpoint, liveness and info page."""

from fastapi import APIRouter, HTTPException, Request

from controllers.mcp_controller import command, health, info, preflight, subscribe
from services.transport.sse_transport import CORS_HEADERS

router = APIRouter()

MCP_PATHS = ("/sse", "/")


def _add_mcp_routes(path: str) -> None:
	router.add_api_route(path, preflight, methods=["OPTIONS"], include_in_schema=False)
	router.add_api_route(path, subscribe_route, methods=["GET"], include_in_schema=False)
	router.add_api_route(path, command_route, methods=["POST"], include_in_schema=False)
	router.add_api_route(path, method_not_allowed, methods=["PUT", "PATCH", "DELETE"], include_in_schema=False)


async def subscribe_route(request: Request):
	try:
		return await subscribe(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


async def command_route(request: Request):
	try:
		return await command(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


async def method_not_allowed():
	raise HTTPException(status_code=405, detail="Method not allowed", headers=CORS_HEADERS)


for _path in MCP_PATHS:
	_add_mcp_routes(_path)


@router.get("/health")
async def health_route(request: Request):
	try:
		return await health(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/info")
async def info_route(request: Request):
	try:
		return await info(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
