from .anime import (
    AliasList,
    CatalogPage,
    Episode,
    EpisodeList,
    Genre,
    MediaItem,
    Relation,
    ResolvedStream,
    StreamCandidate,
    TitleVariants,
)
from .errors import (
    MalformedResponseError,
    NotFoundError,
    ProviderError,
    TransportError,
)

__all__ = [
    "AliasList",
    "CatalogPage",
    "Episode",
    "EpisodeList",
    "Genre",
    "MalformedResponseError",
    "MediaItem",
    "NotFoundError",
    "ProviderError",
    "Relation",
    "ResolvedStream",
    "StreamCandidate",
    "TitleVariants",
    "TransportError",
]
