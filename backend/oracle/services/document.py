"""Live plain-text export of the lore document.

Uses Google Docs' public export endpoint, which works for documents shared
as "anyone with the link" without authentication. An unreachable document is
an expected outcome: every failure path returns ``None``.
"""

import logging
import re

import httpx

from oracle.services.llm import get_http_client

logger = logging.getLogger(__name__)

EXPORT_URL_TEMPLATE = "https://docs.google.com/document/d/{doc_id}/export?format=txt"
USER_AGENT = "Mozilla/5.0 (compatible; The-Oracle-Bot/1.0)"

_DOC_ID_RE = re.compile(r"/document/d/([a-zA-Z0-9-_]+)")


def extract_doc_id(url: str) -> str | None:
    """Return the document id from a ``.../document/d/<id>/...`` URL, else None."""
    match = _DOC_ID_RE.search(url)
    return match.group(1) if match else None


def export_url(doc_id: str) -> str:
    return EXPORT_URL_TEMPLATE.format(doc_id=doc_id)


async def fetch_document_text(doc_id: str) -> str | None:
    """Fetch the document body as plain text.

    Returns the stripped text, or None on transport failure, non-200 status
    or an empty body. No retry.
    """
    url = export_url(doc_id)
    logger.info("Fetching document content from: %s", url)

    client = get_http_client()
    try:
        resp = await client.get(
            url,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )
    except httpx.HTTPError as exc:
        logger.error("Error fetching document %s: %s", doc_id, exc)
        return None

    if resp.status_code != 200:
        logger.error(
            "Failed to fetch document: %s %s", resp.status_code, resp.reason_phrase
        )
        return None

    content = resp.text.strip()
    if not content:
        logger.error("Document content is empty")
        return None

    logger.info("Fetched %d characters from document %s", len(content), doc_id)
    return content


async def load_document_snapshot(url: str) -> str | None:
    doc_id = extract_doc_id(url)
    if doc_id is None:
        logger.warning("No document id in configured URL: %s", url)
        return None
    return await fetch_document_text(doc_id)
