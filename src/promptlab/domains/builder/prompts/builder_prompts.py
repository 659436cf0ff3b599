"""MCP Prompts: starter conversations for building prompts."""

from __future__ import annotations

from fastmcp import FastMCP


def register_builder_prompts(mcp: FastMCP) -> None:
    """Register prompt builder MCP prompts."""

    @mcp.prompt()
    def build_prompt_walkthrough(goal: str = "") -> str:
        """Guided walkthrough for turning a rough idea into a composed prompt."""
        subject = f" for this goal: {goal}" if goal else ""
        return f"""Help me build a high-quality prompt{subject}.

1. Ask me for the task and the outcome I want, then suggest a domain category
2. Recommend a framework (read catalog://frameworks) and fill in its config fields
3. Suggest enhancements or a preset (read catalog://presets) that fit the task
4. Run validate_prompt and check_enhancement_conflicts, and fix what they report
5. Compose the prompt with compose_prompt and show me the final and system prompts

Explain each choice in one sentence."""

    @mcp.prompt()
    def brainstorm_with_verbalized_sampling(topic: str, responses: int = 5) -> str:
        """Brainstorm diverse ideas on a topic using verbalized sampling."""
        return f"""I want {responses} genuinely different ideas about: {topic}

Compose a prompt with compose_prompt using a Generative framework and verbalized
sampling enabled (broad_spectrum, {responses} responses, probability reasoning on,
anti-typicality on). Then run it with execute_prompt and summarize the responses
from the least to the most probable."""
