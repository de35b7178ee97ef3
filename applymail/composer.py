import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from langgraph.graph import StateGraph, END

from .models import ApplicationContext, GeneratedEmail, ExtractedFields, EmailDraft, DEFAULTS, WIRE_NAMES
from .parsing import ParseFailed, parse_reply
from .prompts import EXTRACTOR_SYSTEM, EMAIL_SYSTEM, build_extraction_prompt, build_email_prompt
from .templates import fallback_email, fallback_subject
from .text import sanitize_text, to_plain_multiline, derive_hr_email, truncate_subject

logger = logging.getLogger(__name__)

EXTRACTION_TEMPERATURE = 0.2
GENERATION_TEMPERATURE = 0.3

# fields the extraction call may fill in
EXTRACTED_FIELDS = ("name", "job_role", "company", "location")


def sanitize_context(ctx: ApplicationContext) -> ApplicationContext:
    """Whitespace-collapse every field and fill blanks, deriving the HR email from the company."""
    company = sanitize_text(ctx.company, DEFAULTS["company"])
    hr_email = ctx.hr_email if isinstance(ctx.hr_email, str) and ctx.hr_email.strip() else derive_hr_email(company)
    return ApplicationContext(
        name=sanitize_text(ctx.name, DEFAULTS["name"]),
        user_email=sanitize_text(ctx.user_email, DEFAULTS["user_email"]),
        user_phone=sanitize_text(ctx.user_phone, DEFAULTS["user_phone"]),
        hr_name=sanitize_text(ctx.hr_name, DEFAULTS["hr_name"]),
        hr_email=sanitize_text(hr_email, DEFAULTS["hr_email"]),
        job_role=sanitize_text(ctx.job_role, DEFAULTS["job_role"]),
        company=company,
        company_phone=sanitize_text(ctx.company_phone, DEFAULTS["company_phone"]),
        education=sanitize_text(ctx.education, DEFAULTS["education"]),
        skills=sanitize_text(ctx.skills, DEFAULTS["skills"]),
        location=sanitize_text(ctx.location, DEFAULTS["location"]),
    )


def split_source(source: Any, raw_text: Optional[str] = None):
    """
    Work out (context, raw_text) from what the caller handed in:
    a context, a dict of wire fields, a string, or {"rawText": ...}/{"input": ...}.
    """
    if isinstance(source, ApplicationContext):
        return source, raw_text
    if isinstance(source, str):
        return ApplicationContext(), source
    if isinstance(source, dict):
        for key in ("rawText", "input"):
            value = source.get(key)
            if isinstance(value, str) and value.strip():
                return ApplicationContext(), value
        return ApplicationContext.from_dict(source), raw_text
    if source is None:
        return ApplicationContext(), raw_text
    raise TypeError(f"Cannot compose an email from {type(source).__name__}")


class EmailComposer:
    """
    Builds an application email from a context or free text.

    `llm` is any object with `invoke(system, prompt, schema, temperature)` returning
    a reply with `.parsed` and `.text` (see applymail.llm.GroqCapability). Every
    failure in extraction or generation is absorbed: extraction falls back to
    per-field defaults, generation falls back to the local template.
    """

    def __init__(self, llm=None):
        self.llm = llm
        self.graph = self._build_graph()

    # ----- model calls -----

    def _ask(self, system: str, prompt: str, schema, temperature: float, required=()):
        if self.llm is None:
            return ParseFailed("no model configured")
        try:
            reply = self.llm.invoke(system, prompt, schema, temperature)
        except Exception as e:
            # timeouts surface here too, raised by the client
            return ParseFailed(f"{type(e).__name__}: {e}")
        return parse_reply(getattr(reply, "parsed", None), getattr(reply, "text", ""), required)

    # ----- graph nodes -----

    def extract_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx: ApplicationContext = state["context"]
        result = self._ask(
            EXTRACTOR_SYSTEM,
            build_extraction_prompt(state["raw_text"]),
            ExtractedFields,
            EXTRACTION_TEMPERATURE,
        )
        if not result.ok:
            logger.warning("Field extraction failed, keeping defaults: %s", result.reason)
            state["extraction"] = "failed"
            return state

        updates = {}
        for attr in EXTRACTED_FIELDS:
            seed = sanitize_text(getattr(ctx, attr), DEFAULTS[attr])
            updates[attr] = sanitize_text(result.data.get(WIRE_NAMES[attr]), seed)
        state["context"] = replace(ctx, **updates)
        state["extraction"] = "ok"
        return state

    def sanitize_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["context"] = sanitize_context(state["context"])
        return state

    def build_prompt_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["system"] = EMAIL_SYSTEM
        state["prompt"] = build_email_prompt(state["context"])
        return state

    def generate_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        result = self._ask(
            state["system"],
            state["prompt"],
            EmailDraft,
            GENERATION_TEMPERATURE,
            required=("subject", "body"),
        )
        if result.ok and not to_plain_multiline(result.data["body"]):
            result = ParseFailed("empty body")

        if result.ok:
            state["draft"] = result.data
        else:
            logger.warning("Email generation failed: %s", result.reason)
            state["draft"] = None
        return state

    def finalize_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = state["context"]
        draft = state["draft"]
        subject = sanitize_text(draft["subject"], fallback_subject(ctx))
        state["email"] = GeneratedEmail(
            subject=truncate_subject(subject),
            body=to_plain_multiline(draft["body"]),
        )
        state["source"] = "model"
        return state

    def fallback_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Using fallback template for %s at %s", state["context"].job_role, state["context"].company)
        email = fallback_email(state["context"])
        email.subject = truncate_subject(email.subject)
        state["email"] = email
        state["source"] = "fallback"
        return state

    def _build_graph(self):
        graph = StateGraph(dict)
        graph.add_node("extract", self.extract_node)
        graph.add_node("sanitize", self.sanitize_node)
        graph.add_node("build_prompt", self.build_prompt_node)
        graph.add_node("generate", self.generate_node)
        graph.add_node("finalize", self.finalize_node)
        graph.add_node("fallback", self.fallback_node)

        graph.set_conditional_entry_point(
            lambda state: "extract" if state.get("raw_text") else "sanitize",
            {"extract": "extract", "sanitize": "sanitize"},
        )
        graph.add_edge("extract", "sanitize")
        graph.add_edge("sanitize", "build_prompt")
        graph.add_edge("build_prompt", "generate")
        graph.add_conditional_edges(
            "generate",
            lambda state: "finalize" if state.get("draft") else "fallback",
            {"finalize": "finalize", "fallback": "fallback"},
        )
        graph.add_edge("finalize", END)
        graph.add_edge("fallback", END)
        return graph.compile()

    # ----- public API -----

    def run(self, source: Any, raw_text: Optional[str] = None) -> Dict[str, Any]:
        """Run the whole pipeline and return the final state (context, email, source, ...)."""
        ctx, text = split_source(source, raw_text)
        return self.graph.invoke({"context": ctx, "raw_text": text})

    def compose(self, source: Any, raw_text: Optional[str] = None) -> GeneratedEmail:
        return self.run(source, raw_text)["email"]

    def resolve(self, source: Any, raw_text: Optional[str] = None) -> ApplicationContext:
        """Extraction and sanitization only; no generation call."""
        ctx, text = split_source(source, raw_text)
        state = {"context": ctx, "raw_text": text}
        if text:
            state = self.extract_node(state)
        return self.sanitize_node(state)["context"]
