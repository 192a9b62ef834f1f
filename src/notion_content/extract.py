"""Text extraction utilities for Notion rich text."""


def extract_rich_text(rich_text: list[dict] | None) -> str:
    """Extract plain text from a Notion rich_text array.

    Formatting (annotations, links, mentions) is dropped; runs are joined in
    their declared order.

    Args:
        rich_text: List of rich_text objects from the Notion API.

    Returns:
        Concatenated plain text from all segments.
    """
    if not rich_text:
        return ""
    return "".join(item.get("plain_text", "") for item in rich_text)
