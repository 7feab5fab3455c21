"""FastMCP server creation and wiring.

Logging:
- Two-phase tool logging: tool_start with params, tool_complete with summary
- Categorized exception logging: expected errors as warnings, unexpected
  errors with the traceback at DEBUG
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from feathers_docs.config.models import DocsServerConfig
    from feathers_docs.mcp.context import AppContext
    from feathers_docs.mcp.registry import ToolSpec

log = structlog.get_logger(__name__)

_ENVELOPE_NOTE = (
    "Output is wrapped as {success, result, error, meta} with the payload under "
    "`result`. On failure `meta.error` describes the error."
)


class ToolResponse(BaseModel):
    """Standardized tool response envelope."""

    result: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)

    success: bool
    error: str | None = None


def _extract_log_params(_tool_name: str, kwargs: dict[str, Any]) -> dict[str, Any]:
    """Extract relevant parameters for logging.

    Returns a dict of key params to include in tool_start log, with long
    values truncated.
    """
    params: dict[str, Any] = {}

    for key, value in kwargs.items():
        if isinstance(value, str) and len(value) > 80:
            params[key] = value[:80] + "..."
        elif value is not None:
            params[key] = value

    return params


def _extract_result_summary(tool_name: str, result: dict[str, Any]) -> dict[str, Any]:
    """Extract summary metrics from tool result for logging."""
    summary: dict[str, Any] = {}

    if "total" in result:
        summary["total"] = result["total"]
    if "count" in result:
        summary["count"] = result["count"]
    if "pages" in result and isinstance(result["pages"], int):
        summary["pages"] = result["pages"]
    if "commit" in result:
        summary["commit"] = (result["commit"] or "")[:12]

    if tool_name == "read_doc" and "content" in result:
        summary["chars"] = len(result["content"])

    return summary


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools and the docs resource wired to context.

    Args:
        context: AppContext holding the config and docs index

    Returns:
        Configured FastMCP server ready to run
    """
    import fastmcp
    from fastmcp import FastMCP

    from feathers_docs.config.constants import SERVER_NAME
    from feathers_docs.mcp.registry import registry

    # Import tools to trigger registration
    from feathers_docs.mcp.tools import docs  # noqa: F401

    log.info("mcp_server_creating", repo_url=context.config.repo.url)

    fastmcp.settings.stateless_http = context.config.server.stateless

    mcp = FastMCP(
        SERVER_NAME,
        instructions=(
            "Read-only catalog of the FeathersJS documentation. Use list_docs to find "
            "pages, then read_doc with a returned URI."
        ),
    )

    tool_count = 0
    for spec in registry.get_all():
        _wire_tool(mcp, spec, context)
        tool_count += 1

    _wire_resource(mcp, context)

    log.info("mcp_server_created", tool_count=tool_count)

    return mcp


def _wire_resource(mcp: FastMCP, context: AppContext) -> None:
    """Register the ``feathers-doc://docs/{path*}`` resource template."""
    from fastmcp.exceptions import ResourceError

    from feathers_docs.config.constants import MARKDOWN_MIME_TYPE, RESOURCE_TEMPLATE
    from feathers_docs.mcp.errors import MCPError

    @mcp.resource(
        RESOURCE_TEMPLATE,
        name="feathers-doc",
        description="Markdown source of a FeathersJS documentation page.",
        mime_type=MARKDOWN_MIME_TYPE,
    )
    def read_doc_resource(path: str) -> str:
        try:
            return context.docs_index.read_resource(path)
        except MCPError as e:
            log.warning("resource_error", error_code=e.code.value, error=e.message, path=path)
            raise ResourceError(e.message) from e


def _wire_tool(mcp: FastMCP, spec: ToolSpec, context: AppContext) -> None:
    """Wire a single tool spec to FastMCP.

    Creates a handler function with the params model's fields as direct
    parameters, so FastMCP exposes a flat schema to every MCP client.
    """
    from fastmcp.tools.tool import FunctionTool
    from pydantic import ValidationError

    from feathers_docs.core.errors import InternalError
    from feathers_docs.core.logging import clear_request_id, get_log_file_path, set_request_id
    from feathers_docs.mcp.errors import InvalidArgumentError, MCPError

    params_model = spec.params_model
    spec_handler = spec.handler
    schema = params_model.model_json_schema()

    async def handler(**kwargs: Any) -> dict[str, Any]:
        tool_name = spec.name
        request_id = set_request_id()
        start_time = time.perf_counter()

        log.info("tool_start", tool=tool_name, **_extract_log_params(tool_name, kwargs))

        try:
            try:
                params = params_model(**kwargs)
            except ValidationError as e:
                err = e.errors()[0]
                field_name = ".".join(str(x) for x in err["loc"]) or "arguments"
                raise InvalidArgumentError(field_name, err["msg"], err.get("input")) from e

            result_data: dict[str, Any] = await spec_handler(context, params)

            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            summary = _extract_result_summary(tool_name, result_data)
            log.info("tool_complete", tool=tool_name, elapsed_ms=elapsed_ms, **summary)

            return ToolResponse(
                success=True,
                result=result_data,
                meta={
                    "request_id": request_id,
                    "timestamp": int(time.time() * 1000),
                },
            ).model_dump()

        except MCPError as e:
            # Expected error - log warning, no traceback
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=e.code.value,
                error=e.message,
                path=e.path,
                elapsed_ms=elapsed_ms,
            )
            return ToolResponse(
                success=False,
                result=None,
                error=e.message,
                meta={
                    "request_id": request_id,
                    "error": e.to_response().to_dict(),
                },
            ).model_dump()

        except Exception as e:
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            internal = InternalError.unexpected(
                str(e), tool=tool_name, log_file=get_log_file_path()
            )
            log.error(
                "tool_internal_error",
                tool=tool_name,
                error=str(e),
                elapsed_ms=elapsed_ms,
            )
            # Full traceback at DEBUG level
            log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
            return ToolResponse(
                success=False,
                result=None,
                error=internal.message,
                meta={
                    "request_id": request_id,
                    "error": internal.to_dict(),
                },
            ).model_dump()

        finally:
            clear_request_id()

    tool = FunctionTool(
        name=spec.name,
        description=f"{spec.description}\n\n{_ENVELOPE_NOTE}",
        parameters=schema,
        fn=handler,
    )

    mcp.add_tool(tool)


def run_server(config: DocsServerConfig) -> None:
    """Build the context, index the docs once, then serve the configured transport."""
    from feathers_docs.core.logging import configure_logging
    from feathers_docs.mcp.context import AppContext
    from feathers_docs.mcp.errors import SyncError

    configure_logging(config=config.logging)

    server = config.server
    log.info(
        "mcp_server_starting",
        transport=server.transport,
        repo_url=config.repo.url,
        branch=config.repo.branch,
        cache_dir=str(config.repo.cache_path),
    )

    context = AppContext.create(config)

    try:
        asyncio.run(context.docs_index.refresh())
    except SyncError as e:
        # Serve anyway; get_docs_status reports the failure
        log.error("initial_refresh_failed", error=e.message)

    mcp = create_mcp_server(context)

    log.info("mcp_server_running", transport=server.transport)
    if server.transport == "http":
        mcp.run(transport="http", host=server.host, port=server.port, path=server.endpoint)
    else:
        mcp.run()
