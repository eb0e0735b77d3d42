from .link_validator import LinkValidatorPort
from .metadata import MetadataProviderPort, TitleLookupPort

__all__ = [
    "LinkValidatorPort",
    "MetadataProviderPort",
    "TitleLookupPort",
]
