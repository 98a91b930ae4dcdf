from .requests_transport import RequestsTransport

__all__ = ["RequestsTransport"]
