"""MCP tools for the saved-template library (requires storage)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from promptlab.core.composition.models import PromptTemplate
from promptlab.core.export.serialization import template_to_dict
from promptlab.core.storage.repository import RepositoryError
from promptlab.domains.builder.tools.payloads import (
    InvalidRequestError,
    error_response,
    parse_prompt_request,
)

if TYPE_CHECKING:
    from promptlab.core.storage.repository import TemplateRepository

logger = logging.getLogger(__name__)


def _summary(template: PromptTemplate) -> dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "domain": template.config.domain,
        "framework": template.config.framework or "",
        "tags": template.tags,
        "updatedAt": template.updated_at,
    }


def register_template_tools(mcp: FastMCP, repository: TemplateRepository) -> None:
    """Register template library tools on the MCP server."""

    @mcp.tool
    def save_template(
        name: str,
        base_config: dict[str, Any],
        vs_enhancement: dict[str, Any] | None = None,
        enhancements: dict[str, Any] | None = None,
        description: str = "",
        tags: list[str] | None = None,
        template_id: str = "",
    ) -> str:
        """Save (or update, when template_id is given) a named prompt template."""
        if not name.strip():
            return error_response("Template name is required.")
        try:
            request = parse_prompt_request(base_config, vs_enhancement, enhancements)
        except InvalidRequestError as exc:
            return error_response(str(exc))

        existing = repository.get(template_id) if template_id else None
        template = PromptTemplate(
            id=template_id,
            name=name.strip(),
            description=description,
            config=request.base,
            vs_enhancement=request.vs,
            enhancements=request.enhancements if enhancements else None,
            tags=list(tags or []),
            created_at=existing.created_at if existing else "",
            updated_at="",
        )
        try:
            saved_id = repository.save(template)
        except RepositoryError as exc:
            return error_response(str(exc))
        return json.dumps({"status": "saved", "template": template_to_dict(template), "id": saved_id})

    @mcp.tool
    def list_templates(domain: str = "", limit: int = 50) -> str:
        """List saved templates, newest first, optionally for one domain."""
        found = (
            repository.list_by_domain(domain, limit=limit)
            if domain
            else repository.list_all(limit=limit)
        )
        return json.dumps(
            {"status": "ok", "count": len(found), "templates": [_summary(t) for t in found]}
        )

    @mcp.tool
    def search_templates(query: str, limit: int = 50) -> str:
        """Find templates whose name, description or tags contain the query."""
        found = repository.search(query, limit=limit)
        return json.dumps(
            {
                "status": "ok",
                "query": query,
                "count": len(found),
                "templates": [_summary(t) for t in found],
            }
        )

    @mcp.tool
    def delete_template(template_id: str) -> str:
        """Permanently delete a saved template."""
        if repository.delete(template_id):
            return json.dumps({"status": "deleted", "template_id": template_id})
        return json.dumps(
            {
                "status": "not_found",
                "template_id": template_id,
                "message": "No template found with that ID.",
            }
        )
