import json
import time
from typing import Any, Dict, List, Optional

from app.models.schemas import ChatMessage, Citation, WritingContext
from app.utils.citations import extract_citations
from app.utils.llm_client import GeminiClient
from app.utils.logger import log_performance, logger
from app.utils.sections import PAPER_SECTIONS, split_paper_sections

PAPER_SYSTEM_PROMPT = (
    "You are an expert academic writer. Generate a complete research paper "
    "with the following sections: Abstract, Introduction, Literature Review, "
    "Methodology, Results, Discussion, Conclusion, and References. Use formal "
    "academic language and maintain coherence between sections."
)

CITATIONS_SYSTEM_PROMPT = (
    "You are a research librarian. Generate accurate and relevant academic "
    "citations for the given topic. Include full citation details and ensure "
    "proper academic formatting."
)


async def _complete(
    gateway: GeminiClient,
    operation: str,
    messages: List[ChatMessage],
    temperature: float,
    max_tokens: int,
) -> str:
    start_time = time.time()
    result = await gateway.complete(
        messages, temperature=temperature, max_tokens=max_tokens
    )
    duration = (time.time() - start_time) * 1000
    log_performance(
        operation,
        duration,
        success=True,
        metadata={
            "prompt_length": sum(len(m.content) for m in messages),
            "output_length": len(result),
        },
    )
    return result


async def generate_paper(gateway: GeminiClient, topic: str) -> Dict[str, str]:
    messages = [
        ChatMessage(role="system", content=PAPER_SYSTEM_PROMPT),
        ChatMessage(
            role="user",
            content=f"Generate a complete research paper about: {topic}. Include all sections.",
        ),
    ]
    content = await _complete(
        gateway, "generate_paper_completion", messages, temperature=0.7, max_tokens=4000
    )

    sections = split_paper_sections(content, PAPER_SECTIONS)
    logger.info(
        f"Paper generated: {len(content)} chars, "
        f"{len(sections)}/{len(PAPER_SECTIONS)} sections detected"
    )
    return sections


async def fetch_citations(gateway: GeminiClient, topic: Optional[str]) -> List[Citation]:
    messages = [
        ChatMessage(role="system", content=CITATIONS_SYSTEM_PROMPT),
        ChatMessage(
            role="user",
            content=f"Generate 10 relevant academic citations for research on: {topic}",
        ),
    ]
    content = await _complete(
        gateway, "fetch_citations_completion", messages, temperature=0.7, max_tokens=1500
    )
    return extract_citations(content)


async def format_paper(gateway: GeminiClient, paper: Any, style: Optional[str]) -> str:
    paper_json = json.dumps(paper, ensure_ascii=False)
    messages = [
        ChatMessage(
            role="system",
            content=(
                "You are an expert in academic writing and citation styles. "
                f"Format the given research paper according to {style} style guidelines."
            ),
        ),
        ChatMessage(
            role="user",
            content=f"Format this paper in {style} style:\n\n{paper_json}",
        ),
    ]
    return await _complete(
        gateway, "format_paper_completion", messages, temperature=0.3, max_tokens=2000
    )


def build_improve_system_prompt(context: Optional[WritingContext]) -> str:
    """Three-line system prompt; lines without a matching hint stay empty."""
    context = context or WritingContext()

    if context.paperTitle:
        subject = f'a paper titled "{context.paperTitle}"'
    else:
        subject = "a research paper"
    abstract_line = (
        f'The paper\'s abstract: "{context.abstract}"' if context.abstract else ""
    )
    section_line = (
        f"Currently working on: {context.sectionTitle}" if context.sectionTitle else ""
    )

    return "\n".join(
        [f"You are an expert academic writer working on {subject}.", abstract_line, section_line]
    )


async def improve_writing(
    gateway: GeminiClient, content: str, context: Optional[WritingContext] = None
) -> str:
    messages = [
        ChatMessage(role="system", content=build_improve_system_prompt(context)),
        ChatMessage(role="user", content=f"Improve this academic writing:\n\n{content}"),
    ]
    return await _complete(
        gateway, "improve_writing_completion", messages, temperature=0.7, max_tokens=2000
    )
