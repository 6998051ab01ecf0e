"""Mockup generator - produces HTML/CSS variants for a detected intent."""

import logging

from langchain_core.prompts import ChatPromptTemplate

from ..config import settings
from ..models.mockup import MockupRequest, MockupResult
from .llm_service import get_llm

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY = "#3b82f6"
DEFAULT_SECONDARY = "#64748b"
DEFAULT_ACCENT = "#10b981"

SYSTEM_PROMPT = """You are an expert UI/UX designer who creates clean, modern HTML/CSS mockups.

Generate 1-2 design variants based on the request. Each variant should:
1. Be self-contained (no external dependencies)
2. Use modern CSS (flexbox, grid, CSS variables)
3. Be responsive and accessible
4. Include realistic placeholder content
5. Use clean, semantic HTML5

Style guidelines:
- Use a clean, modern aesthetic
- Include appropriate padding and spacing
- Use readable font sizes (16px base)
- Ensure good color contrast
- Add subtle hover states where appropriate

The CSS should be complete and work standalone. Use CSS variables for colors so they can be easily customized.

Return HTML that can be directly rendered in a sandboxed iframe."""

PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", "{request}"),
])


def build_mockup_prompt(request: MockupRequest) -> str:
    """Render the user prompt for a mockup request."""
    lines = [f"Create a mockup for: {request.component}", "", f"Intent: {request.intent}"]

    if request.context:
        lines.append(f"Context: {request.context}")

    if request.brand_colors:
        colors = request.brand_colors
        lines += [
            "",
            "Brand colors to use:",
            f"- Primary: {colors.primary or DEFAULT_PRIMARY}",
            f"- Secondary: {colors.secondary or DEFAULT_SECONDARY}",
            f"- Accent: {colors.accent or DEFAULT_ACCENT}",
        ]

    lines += ["", "Generate 1-2 design variants. Make them visually distinct but both solve the requirement."]
    return "\n".join(lines)


async def generate_mockup(request: MockupRequest) -> MockupResult:
    """Generate 1-2 mockup variants for ``request``."""
    logger.info(f"Generating mockup for component: {request.component}")

    llm = get_llm(model=settings.OPENAI_MOCKUP_MODEL, temperature=0.7)
    structured_llm = llm.with_structured_output(MockupResult)

    messages = PROMPT.format_messages(request=build_mockup_prompt(request))
    result = await structured_llm.ainvoke(messages)

    logger.info(f"Generated {len(result.variants)} mockup variant(s) for {request.component}")
    return result
