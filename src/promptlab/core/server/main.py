"""PromptLab server entry point: ``python -m promptlab.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from promptlab.core.config.settings import Settings, get_settings
from promptlab.core.server.app import create_app

logger = logging.getLogger(__name__)

_LOOPBACK_NAMES = frozenset({"localhost", "ip6-localhost", "ip6-loopback"})


def _is_loopback_host(host: str) -> bool:
    host = host.strip().lower()
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if host in _LOOPBACK_NAMES:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def bind_address(settings: Settings) -> tuple[str, int]:
    """Return the (host, port) the prompt server may listen on.

    The server has no authentication, so any non-loopback host is refused
    unless PROMPTLAB_ALLOW_INSECURE_BIND is set.
    """
    host = settings.promptlab_host
    if _is_loopback_host(host):
        return host, settings.promptlab_port
    if not settings.promptlab_allow_insecure_bind:
        raise RuntimeError(
            f"PromptLab has no authentication and will not listen on non-loopback "
            f"address {host!r}. Use 127.0.0.1, or set PROMPTLAB_ALLOW_INSECURE_BIND=true "
            "to expose composed prompts and saved templates to the network."
        )
    logger.warning(
        "Exposing PromptLab on %s without authentication (PROMPTLAB_ALLOW_INSECURE_BIND)", host
    )
    return host, settings.promptlab_port


def run() -> None:
    """Start the prompt composition server over Streamable HTTP."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.promptlab_log_level.upper(), logging.INFO))

    host, port = bind_address(settings)
    mcp = create_app()
    logger.info(
        "PromptLab listening on http://%s:%d/mcp (provider=%s, db=%s)",
        host,
        port,
        settings.llm_provider,
        settings.db_path,
    )
    mcp.run(transport="streamable-http", host=host, port=port)


if __name__ == "__main__":
    run()
