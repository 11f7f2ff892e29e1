"""
Transport layer: host normalization, the HTTP exchange, error classification,
single-shot JSON exchange and NDJSON streaming.

This package exposes:
- networking: host parsing/resolution and default headers
- classify: turning transport failures and error responses into the taxonomy
- http: TransportHttpClient, one HTTP exchange per call
- exchange: JSON encode/send/decode helpers
- stream: Stream, the incremental NDJSON decoder
"""

__all__ = ["networking", "classify", "http", "exchange", "stream"]
