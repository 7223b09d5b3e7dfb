"""Turn raw search hits into supporting content records."""

from typing import Any, Iterable, List, Mapping, Optional

from src.corpus.models.retrieval import SupportingContentRecord

SOURCE_PAGE_FIELD = "sourcepage"
CONTENT_FIELD = "content"
CAPTIONS_FIELD = "@search.captions"
CAPTION_SEPARATOR = " . "


def _caption_text(caption: Any) -> Any:
    # SDK results carry QueryCaptionResult objects; plain strings and dicts are accepted too
    if isinstance(caption, str):
        return caption
    if isinstance(caption, Mapping):
        return caption.get("text")
    return getattr(caption, "text", None)


def _read_content(hit: Mapping[str, Any], use_semantic_captions: bool) -> Optional[str]:
    if use_semantic_captions:
        captions = hit.get(CAPTIONS_FIELD)
        if captions is None:
            return None
        texts = [_caption_text(caption) for caption in captions]
        if not all(isinstance(text, str) for text in texts):
            return None
        return CAPTION_SEPARATOR.join(texts)

    content = hit.get(CONTENT_FIELD)
    return content if isinstance(content, str) else None


def flatten_whitespace(content: str) -> str:
    """Replace every carriage return and line feed with a single space."""
    return content.replace("\r", " ").replace("\n", " ")


def assemble_supporting_content(
    hits: Iterable[Mapping[str, Any]],
    use_semantic_captions: bool = False,
) -> List[SupportingContentRecord]:
    """
    Extract (source page, content) records from search hits in hit order.

    Hits without a string source page or readable content are dropped.

    Args:
        hits: Search results as field mappings.
        use_semantic_captions: Use joined captions instead of the content field.

    Returns:
        Records in the order the search service ranked them.
    """
    records: List[SupportingContentRecord] = []
    for hit in hits:
        source_page = hit.get(SOURCE_PAGE_FIELD)
        content = _read_content(hit, use_semantic_captions)
        if isinstance(source_page, str) and content is not None:
            records.append(SupportingContentRecord(source_page, flatten_whitespace(content)))
    return records
