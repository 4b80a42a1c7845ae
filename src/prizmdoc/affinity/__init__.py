"""Affinity token tracking for PrizmDoc requests."""

from prizmdoc.affinity.extraction import (
    AFFINITY_TOKEN_FIELD,
    AFFINITY_TOKEN_HEADER,
    extract_affinity_token,
    is_json_media_type,
)
from prizmdoc.affinity.session import AffinitySession, AsyncAffinitySession
from prizmdoc.affinity.state import AffinityTokenState

__all__ = [
    "AFFINITY_TOKEN_FIELD",
    "AFFINITY_TOKEN_HEADER",
    "AffinitySession",
    "AffinityTokenState",
    "AsyncAffinitySession",
    "extract_affinity_token",
    "is_json_media_type",
]
