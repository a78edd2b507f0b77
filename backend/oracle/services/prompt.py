from oracle.prompts.oracle_system import (
    DOCUMENT_AVAILABLE_NOTE,
    DOCUMENT_UNAVAILABLE_NOTE,
    DOCUMENT_UNAVAILABLE_NOTICE,
    ORACLE_SYSTEM_PROMPT,
)


def build_system_prompt(document_text: str | None) -> str:
    """Build the Oracle system prompt around one document snapshot.

    The document text is embedded verbatim. When it is None the fallback
    notice takes its place, along with an instruction to disclose the gap.
    """
    if document_text:
        return ORACLE_SYSTEM_PROMPT.format(
            document=document_text,
            document_note=DOCUMENT_AVAILABLE_NOTE,
        )
    return ORACLE_SYSTEM_PROMPT.format(
        document=DOCUMENT_UNAVAILABLE_NOTICE,
        document_note=DOCUMENT_UNAVAILABLE_NOTE,
    )
