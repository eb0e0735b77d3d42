from .anime_detail import AnimeDetail, AnimeDetailUseCase
from .catalog import CatalogUseCase
from .episodes import EpisodeResolver
from .playback import PlaybackUseCase, PlaybackView
from .stream import StreamProbe
from .suggestions import SuggestionBuilder

__all__ = [
    "AnimeDetail",
    "AnimeDetailUseCase",
    "CatalogUseCase",
    "EpisodeResolver",
    "PlaybackUseCase",
    "PlaybackView",
    "StreamProbe",
    "SuggestionBuilder",
]
