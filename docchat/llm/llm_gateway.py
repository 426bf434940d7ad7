import logging
from docchat.errors import UpstreamError
from docchat.llm.client import LLMClient

logger = logging.getLogger(__name__)

NOT_FOUND_ANSWER = "Answer not found in the provided document."
FAILURE_REPLY = "The assistant could not answer right now. Please try again later."

SYSTEM_PROMPT = f"""You are a strict document-based assistant.
Answer ONLY from the document.
If not found, reply exactly:
"{NOT_FOUND_ANSWER}"
Use Markdown, bold headings, bullet points only."""

def build_messages(context: str, question: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Document:\n{context}\n\nQuestion:\n{question}"},
    ]

def answer_from_response(data: dict) -> str:
    """Content of the first choice, or the not-found phrase when it is absent."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("inference response without an answer: %.500s", data)
        return NOT_FOUND_ANSWER
    if not isinstance(content, str) or not content.strip():
        return NOT_FOUND_ANSWER
    return content.strip()


class InferenceGateway:
    def __init__(self, client: LLMClient, max_tokens: int = 512):
        self.client = client
        self.max_tokens = max_tokens

    async def ask(self, context: str, question: str) -> str:
        try:
            data = await self.client.chat_completions(
                build_messages(context, question),
                temperature=0,
                max_tokens=self.max_tokens,
            )
        except UpstreamError as e:
            logger.error("inference call failed: %s", e.detail)
            return FAILURE_REPLY
        return answer_from_response(data)
