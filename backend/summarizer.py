"""
summarizer.py — Kanoon Gateway
Plain-language summaries of statute sections and judgments, and short answers
to legal questions, via Groq.

Judgments come back from Indian Kanoon as HTML; they are reduced to paragraph
text with BeautifulSoup and capped before being sent to the model.
The Groq SDK is synchronous, so calls run in a worker thread.
"""

import asyncio
import logging

from bs4 import BeautifulSoup
from groq import APIError, Groq

from kanoon_client import ConfigurationError, GatewayError
from settings import Settings

logger = logging.getLogger("kanoon.summarizer")

SECTION_PROMPT = (
    "You explain Indian law to people without legal training. "
    "Summarize the legal section you are given in simple terms, in no more than "
    "5 to 6 lines. Keep section numbers and act names exactly as written. "
    "Do not give advice and do not add facts that are not in the text."
)

JUDGMENT_PROMPT = (
    "You explain Indian court judgments to people without legal training. "
    "Summarize the judgment you are given: who the parties were, the question "
    "before the court, what the court decided and why. Use at most 8 short "
    "sentences. Cite sections and acts exactly as they appear in the text. "
    "Do not speculate beyond the text."
)

LEGAL_QA_PROMPT = (
    "You are an expert in Indian law and the Constitution of India. "
    "Answer the user's question accurately and concisely, in well-structured "
    "plain language. Cite the relevant sections, articles and acts where they "
    "apply. If the question is outside Indian law, say so briefly. "
    "Give general legal information, not advice for the user's particular case."
)


class SummarizerError(GatewayError):
    status_code = 502


# ---------------------------------------------------------------------------
# HTML → clean text
# ---------------------------------------------------------------------------


def html_to_text(html: str, max_chars: int) -> str:
    """Strip markup and noise tags, keep one line per block, cap at max_chars."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style", "noscript", "iframe", "img", "button", "form"]):
        tag.decompose()

    lines = []
    for line in soup.get_text(separator="\n").splitlines():
        line = " ".join(line.split())
        if line:
            lines.append(line)
    return "\n".join(lines)[:max_chars]


# ---------------------------------------------------------------------------
# Groq
# ---------------------------------------------------------------------------


class Summarizer:
    def __init__(self, client: Groq, model: str, max_chars: int):
        self._client = client
        self.model = model
        self.max_chars = max_chars

    async def summarize_section(self, text: str) -> str:
        return await self._complete(SECTION_PROMPT, f'Legal section:\n"{text[:self.max_chars]}"')

    async def summarize_judgment(self, title: str, html: str) -> str:
        body = html_to_text(html, self.max_chars)
        if not body:
            raise SummarizerError("Document has no text to summarize", status_code=422)
        return await self._complete(JUDGMENT_PROMPT, f"Title: {title}\n\nJudgment text:\n{body}")

    async def answer_question(self, question: str) -> str:
        return await self._complete(LEGAL_QA_PROMPT, f"Question: {question[:self.max_chars]}")

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        logger.info("Groq request: %d chars with %s", len(user_prompt), self.model)
        try:
            response = await asyncio.to_thread(
                self._client.chat.completions.create,
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.2,
            )
        except APIError as exc:
            logger.error("Groq call failed: %s", exc)
            raise SummarizerError(f"Summarizer error: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise SummarizerError("Summarizer error: empty completion")
        return content.strip()


def build_summarizer(settings: Settings) -> Summarizer:
    if not settings.groq_api_key:
        raise ConfigurationError("Summarizer not configured")
    return Summarizer(
        Groq(api_key=settings.groq_api_key),
        model=settings.summary_model,
        max_chars=settings.summary_max_chars,
    )
