from searchqa.models.message import MessageHistory
from searchqa.models.website import Website, WebpageEmbedding

__all__ = [
    "MessageHistory",
    "Website",
    "WebpageEmbedding",
]
