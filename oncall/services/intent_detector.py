"""Intent detector - classifies a transcript fragment as a UI request or not."""

import logging

from langchain_core.prompts import ChatPromptTemplate

from ..models.intent import IntentResult
from .llm_service import get_llm

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert at analyzing conversation transcripts from customer calls to detect UI/UX feature requests and design requirements.

Your job is to:
1. Determine if the user is requesting a UI feature, component, or design change
2. Extract the specific component type they're asking about
3. Summarize their intent clearly
4. Provide relevant context

Examples of UI requests:
- "We need a better login page" -> isUiRequest: true, component: "login form", intent: "improve login page design"
- "Can you add a dashboard with charts?" -> isUiRequest: true, component: "dashboard", intent: "create dashboard with data visualization"
- "The button colors are hard to read" -> isUiRequest: true, component: "button", intent: "improve button color contrast"

Examples of non-UI requests:
- "When is our next meeting?" -> isUiRequest: false
- "Can you send me the invoice?" -> isUiRequest: false
- "I have a billing question" -> isUiRequest: false

Be accurate and conservative - only mark as UI request if there's clear evidence."""

PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", "Analyze the following transcript and detect if there's a UI/design request:\n\n\"{transcript}\""),
])


async def detect_intent(transcript_text: str) -> IntentResult:
    """Classify a transcript fragment.

    Errors from the model call propagate; callers decide whether to
    swallow them.
    """
    llm = get_llm(temperature=0)
    structured_llm = llm.with_structured_output(IntentResult)

    messages = PROMPT.format_messages(transcript=transcript_text)
    result = await structured_llm.ainvoke(messages)

    logger.info(
        f"Intent classified - UI request: {result.is_ui_request}, "
        f"Confidence: {result.confidence:.2f}, Component: {result.component}"
    )
    return result
