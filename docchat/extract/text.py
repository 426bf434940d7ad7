import io
import logging
import re
from pdfminer.high_level import extract_text as pdf_extract_text

logger = logging.getLogger(__name__)

def clean_text(raw: str) -> str:
    if not raw:
        return ""

    raw = raw.replace("\x0c", "\n\n")
    raw = raw.replace("\r\n", "\n").replace("\r", "\n")
    raw = re.sub(r"[ \t]{2,}", " ", raw)
    raw = "\n".join(line.strip() for line in raw.split("\n"))
    raw = re.sub(r"\n{3,}", "\n\n", raw)

    return raw.strip()

def _extract_pdf(data: bytes) -> str:
    try:
        return pdf_extract_text(io.BytesIO(data)) or ""
    except Exception:
        # pdfminer raises assorted errors on malformed files; all mean "no text"
        logger.warning("pdf text extraction failed", exc_info=True)
        return ""

def extract_text(data: bytes, content_type: str) -> str:
    """Plain text of a stored upload; "" when nothing readable is in it.

    PDF pages come out in document order. Images carry no text layer and
    yield "" (there is no OCR).
    """
    if content_type == "application/pdf":
        raw = _extract_pdf(data)
    elif content_type.startswith("text/"):
        raw = data.decode("utf-8", errors="replace")
    else:
        raw = ""
    return clean_text(raw)
