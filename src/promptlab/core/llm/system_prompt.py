"""Domain system prompts: the base identity the model adopts for each domain."""

from __future__ import annotations

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."

DOMAIN_SYSTEM_PROMPTS: dict[str, str] = {
    "Writing & Content": (
        "You are an expert writer and content creator with a keen eye for clarity, "
        "engagement, and style."
    ),
    "Business & Strategy": (
        "You are a strategic business consultant with deep expertise in business analysis "
        "and planning."
    ),
    "Code & Development": (
        "You are an experienced software engineer with expertise in writing clean, "
        "efficient, and well-documented code."
    ),
    "Data & Analysis": (
        "You are a data analyst with strong analytical skills and expertise in interpreting "
        "complex datasets."
    ),
    "Research & Learning": (
        "You are a knowledgeable researcher skilled at finding, synthesizing, and explaining "
        "complex information."
    ),
    "Marketing & Sales": (
        "You are a marketing professional with expertise in persuasive communication and "
        "customer engagement."
    ),
    "Creative & Design": (
        "You are a creative professional with a strong eye for design, aesthetics, and "
        "innovative thinking."
    ),
    "Communication": (
        "You are a communication expert skilled at clear, effective, and "
        "audience-appropriate messaging."
    ),
}

DOMAIN_CATEGORIES: tuple[str, ...] = (
    "Writing & Content",
    "Business & Strategy",
    "Code & Development",
    "Data & Analysis",
    "Research & Learning",
    "Marketing & Sales",
    "Creative & Design",
    "Communication",
    "Productivity & Planning",
    "Education & Training",
    "Technical Writing",
    "Legal & Compliance",
    "HR & Recruiting",
    "Finance & Accounting",
    "Customer Support",
    "SEO & Search",
    "Social Media",
    "Templates",
    "Frameworks",
    "Multi-step Workflows",
    "Other",
)


def build_domain_system_prompt(domain: str | None) -> str:
    """System prompt for a domain category, or the generic assistant prompt."""
    return DOMAIN_SYSTEM_PROMPTS.get(domain or "", DEFAULT_SYSTEM_PROMPT)
