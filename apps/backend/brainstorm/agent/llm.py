from __future__ import annotations
import asyncio
import logging
import os
from functools import lru_cache
from typing import Any
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from brainstorm.services.errors import LLMCallError

logger = logging.getLogger(__name__)


def _to_message(x: Any) -> BaseMessage:
    if isinstance(x, BaseMessage):
        return x
    if isinstance(x, str):
        return HumanMessage(content=x)
    if isinstance(x, dict):
        role = (x.get("role") or "user").lower()
        content = x.get("content", "")
        if role == "system":
            return SystemMessage(content=str(content))
        if role in ("assistant", "ai"):
            return AIMessage(content=str(content))
        return HumanMessage(content=str(content))
    return HumanMessage(content=str(x))


def normalize_messages(messages: list[Any]) -> list[BaseMessage]:
    return [_to_message(m) for m in (messages or [])]


@lru_cache(maxsize=4)
def make_llm(model: str | None = None, temperature: float | None = None) -> ChatOpenAI:
    model_name = model or os.getenv("CHAT_OPENAI_MODEL", "gpt-4o-mini")
    max_out = int(os.getenv("CHAT_OPENAI_MAX_OUTPUT_TOKENS", "2048"))
    if temperature is None:
        temperature = float(os.getenv("CHAT_OPENAI_TEMPERATURE", "0.2"))
    return ChatOpenAI(model=model_name, max_tokens=max_out, temperature=temperature)


def _content_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Content blocks: keep the text parts in order.
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text") or ""))
        return "".join(parts)
    return str(content)


async def call_llm_text(
    messages: list[Any],
    *,
    model: str | None = None,
    temperature: float | None = None,
) -> str:
    """Send one chat request and return the raw text completion.

    Any failure of the call (network, provider, timeout) surfaces as
    LLMCallError. Nothing is retried here.
    """
    timeout = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    ms = normalize_messages(messages)
    try:
        llm = make_llm(model=model, temperature=temperature)
        reply = await asyncio.wait_for(llm.ainvoke(ms), timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("LLM call timed out after %.0fs", timeout)
        raise LLMCallError(f"language model call timed out after {timeout:.0f}s") from exc
    except Exception as exc:
        logger.exception("LLM call failed")
        raise LLMCallError(f"language model call failed: {exc}") from exc
    return _content_text(reply)
