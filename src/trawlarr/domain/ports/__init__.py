from .indexer_search import IndexerSearchPort
from .transport import HttpTransportPort, PreparedRequest, TransportResponse

__all__ = [
    "HttpTransportPort",
    "IndexerSearchPort",
    "PreparedRequest",
    "TransportResponse",
]
