"""
Context assembly: top-ranked documents serialised into one prompt, bounded
by a character budget.
"""

import json

from searchqa.services.sources.models import RankedDocument


def _serialize(documents: list[dict]) -> str:
    return json.dumps(documents, ensure_ascii=False)


def assemble_context(query: str, documents: list[RankedDocument], max_chars: int) -> str:
    """
    Return ``Query: {query}, Top Results: {json}``.

    Documents are added in rank order while the serialised list stays within
    `max_chars`. If even the first document does not fit, its content is cut
    down so the answer still gets some grounding.
    """
    included: list[dict] = []
    for doc in documents:
        candidate = included + [doc.model_dump()]
        if len(_serialize(candidate)) <= max_chars:
            included = candidate
            continue

        if not included:
            item = doc.model_dump()
            overhead = len(_serialize([{**item, "content": ""}]))
            budget = max(max_chars - overhead, 0)
            # json escaping can grow the text, so shrink until it fits
            content = doc.content[:budget]
            while content and len(_serialize([{**item, "content": content}])) > max_chars:
                content = content[: len(content) - max(1, len(content) // 10)]
            item["content"] = content
            included = [item]
        break

    return f"Query: {query}, Top Results: {_serialize(included)}"
