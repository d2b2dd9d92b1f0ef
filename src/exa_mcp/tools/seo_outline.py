"""SEO outline generator tool.

Searches for a topic, mines the hits for heading candidates, recurring
sentences, questions and frequent words, and renders a markdown content
outline. The analysis is deterministic: the same results always give the
same outline.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from exa_mcp.core.errors import UpstreamError
from exa_mcp.exa.models import SearchRequest
from exa_mcp.tools.base import ToolDescriptor, ToolResult
from exa_mcp.tools.search import MISSING_API_KEY_TEXT

if TYPE_CHECKING:
    from exa_mcp.exa.models import SearchResult
    from exa_mcp.tools.base import ToolContext
    from exa_mcp.tools.registry import ToolRegistry

TOOL_ID = "seo_outline_generator"
SEARCH_RESULTS = 5

NO_RESULTS_TEXT = (
    "Unable to generate an SEO outline. No search results were found for the "
    "given topic. Please try a different topic or check your API configuration."
)
FAILURE_TEXT = (
    "An error occurred while generating the SEO outline. Please try again later."
)

DESCRIPTION = (
    "You are an expert SEO content strategist. Given a keyword or topic, "
    "generate a detailed content outline optimized for search engine ranking. "
    "Include an introduction, main sections with H1 and H2 headings, and bullet "
    "points with key information or questions to address. Focus on clarity, "
    "relevance, and SEO best practices (e.g., keyword usage, user intent). "
    "Return the outline in a markdown format."
)

_TITLE_SEPARATORS = re.compile(r"[:\-|–—]")
_SENTENCE_END = re.compile(r"[.!?]\s+")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_QUESTION_WORDS = ("what", "why", "how", "when", "where", "who", "which")


class SeoOutlineInput(BaseModel):
    topic: str = Field(min_length=1, description="The topic to generate an outline for")
    keywords: str = Field(
        default="",
        description="Comma-separated keywords the outline should target",
    )


@dataclass(frozen=True, slots=True)
class OutlineInsights:
    potential_headings: list[str]
    common_phrases: list[str]
    questions: list[str]
    keyword_frequency: list[tuple[str, int]]


def parse_keywords(keywords: str) -> list[str]:
    return [k.strip() for k in keywords.split(",") if k.strip()]


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _sentences(texts: list[str]) -> list[str]:
    return _SENTENCE_END.split(" ".join(texts))


def extract_headings(titles: list[str]) -> list[str]:
    """Split titles on common separators; keep parts of 4..99 characters."""
    parts = [
        part.strip()
        for title in titles
        for part in _TITLE_SEPARATORS.split(title)
    ]
    return _unique([p for p in parts if 3 < len(p) < 100])


def extract_common_phrases(texts: list[str], limit: int = 15) -> list[str]:
    phrases = [
        s.strip()
        for s in _sentences(texts)
        if 10 < len(s) < 100 and "?" not in s
    ]
    return _unique(phrases)[:limit]


def extract_questions(texts: list[str], limit: int = 10) -> list[str]:
    questions: list[str] = []
    for sentence in _sentences(texts):
        if not 10 < len(sentence) < 100:
            continue
        if "?" not in sentence and not sentence.lower().startswith(_QUESTION_WORDS):
            continue
        question = sentence.strip()
        if not question.endswith("?"):
            question += "?"
        questions.append(question)
    return _unique(questions)[:limit]


def analyze_keyword_frequency(texts: list[str], limit: int = 20) -> list[tuple[str, int]]:
    """Most frequent words longer than three characters; ties keep first-seen order."""
    words = (_NON_ALNUM.sub("", w) for w in " ".join(texts).lower().split())
    return Counter(w for w in words if len(w) > 3).most_common(limit)


def analyze_search_results(results: list[SearchResult]) -> OutlineInsights:
    titles = [r.title for r in results if r.title]
    texts = [r.text or "" for r in results]
    return OutlineInsights(
        potential_headings=extract_headings(titles),
        common_phrases=extract_common_phrases(texts),
        questions=extract_questions(texts),
        keyword_frequency=analyze_keyword_frequency(texts),
    )


def generate_outline(topic: str, insights: OutlineInsights, keywords: list[str]) -> str:
    """Render the markdown outline."""
    target_keywords = keywords or [k for k, _ in insights.keyword_frequency[:5]]

    lines = [f"# Comprehensive SEO Content Outline: {topic}", ""]

    if target_keywords:
        lines += ["## Target Keywords", ""]
        lines += [f"- {k}" for k in target_keywords]
        lines.append("")

    lines += [
        "## Introduction",
        "",
        f"- Brief overview of {topic}",
        f"- Why {topic} is important/relevant",
        "- What readers will learn from this content",
        "",
    ]

    for index, heading in enumerate(insights.potential_headings[:5]):
        lines += [f"## {heading}", ""]
        phrases = insights.common_phrases[index * 3 : index * 3 + 3]
        lines += [f"- {p}" for p in phrases]
        lines.append("")

    if insights.questions:
        lines += ["## Frequently Asked Questions", ""]
        for question in insights.questions[:5]:
            lines += [f"### {question}", "", f"- Answer to address: {question}", ""]

    lines += [
        "## Conclusion",
        "",
        f"- Summary of key points about {topic}",
        f"- Final thoughts on {topic}",
        "- Call to action or next steps",
        "",
        "---",
        "",
        f'*This SEO outline was generated for the topic: "{topic}"*',
    ]
    return "\n".join(lines)


async def seo_outline_generator(args: SeoOutlineInput, ctx: ToolContext) -> ToolResult:
    log = ctx.logger
    keywords = parse_keywords(args.keywords)
    log.info("Generating SEO outline for topic: %s", args.topic)
    log.info("Using keywords: %s", ", ".join(keywords) or "None provided")

    if not ctx.client.has_api_key:
        log.warning("Missing Exa API key")
        return ToolResult.error(MISSING_API_KEY_TEXT)

    query = " ".join([args.topic, *keywords])
    request = SearchRequest.build(
        query,
        max_characters=ctx.client.config.max_characters,
        num_results=SEARCH_RESULTS,
    )
    try:
        response = await ctx.client.search(request)
        if not response.results:
            log.warning("Empty response from Exa API")
            return ToolResult.text(NO_RESULTS_TEXT)

        insights = analyze_search_results(response.results)
        log.info(
            "Extracted %d potential headings, %d questions, and %d key phrases",
            len(insights.potential_headings),
            len(insights.questions),
            len(insights.keyword_frequency),
        )
        outline = generate_outline(args.topic, insights, keywords)
    except UpstreamError as exc:
        log.warning("Error generating SEO outline: %s", exc)
        return ToolResult.error(FAILURE_TEXT, f"Details: {exc}")
    except Exception as exc:
        log.exception("Unexpected error generating SEO outline")
        return ToolResult.error(FAILURE_TEXT, f"Details: {exc}")

    return ToolResult.text(outline)


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolDescriptor(
            id=TOOL_ID,
            name="SEO Outline Generator",
            description=DESCRIPTION,
            input_model=SeoOutlineInput,
            handler=seo_outline_generator,
        )
    )
