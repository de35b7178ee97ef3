import os
from dataclasses import dataclass
from typing import Any, Optional, Type

from dotenv import load_dotenv
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from pydantic import BaseModel

load_dotenv()

GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))


def get_llm(
    temperature: float = 0.3,
    timeout: Optional[float] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> ChatGroq:
    api_key = api_key or GROQ_API_KEY
    if not api_key:
        raise ValueError("GROQ_API_KEY not set. Add it to .env")
    return ChatGroq(
        groq_api_key=api_key,
        model_name=model or GROQ_MODEL,
        temperature=temperature,
        request_timeout=timeout if timeout is not None else LLM_TIMEOUT,
        max_retries=LLM_MAX_RETRIES,
    )


@dataclass
class ModelReply:
    """What came back from one call: the schema-validated object if any, and the raw text."""
    parsed: Any
    text: str


class GroqCapability:
    """
    Schema-constrained calls against a Groq chat model.

    The chat models for `temperatures` are built once, up front, and only read
    afterwards, so one instance can be shared across requests. Any other
    temperature gets a fresh model for that call. `timeout` bounds each request
    to the provider; a timeout is raised like any other client error.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[float] = None, temperatures=(0.2, 0.3)):
        self.api_key = api_key or GROQ_API_KEY
        self.model = model or GROQ_MODEL
        self.timeout = timeout if timeout is not None else LLM_TIMEOUT
        if not self.api_key:
            raise ValueError("GROQ_API_KEY not set. Add it to .env")
        self._models = {t: self._build(t) for t in temperatures}

    def _build(self, temperature: float) -> ChatGroq:
        return get_llm(
            temperature=temperature,
            timeout=self.timeout,
            api_key=self.api_key,
            model=self.model,
        )

    def _chat(self, temperature: float) -> ChatGroq:
        chat = self._models.get(temperature)
        return chat if chat is not None else self._build(temperature)

    def invoke(self, system: str, prompt: str, schema: Type[BaseModel],
               temperature: float) -> ModelReply:
        structured = self._chat(temperature).with_structured_output(
            schema, method="json_mode", include_raw=True
        )
        out = structured.invoke([SystemMessage(content=system), HumanMessage(content=prompt)])
        raw = out.get("raw")
        text = raw.content if raw is not None else ""
        if not isinstance(text, str):
            text = str(text)
        return ModelReply(parsed=out.get("parsed"), text=text)
