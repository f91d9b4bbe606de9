"""I/O collaborators: the invoice API client and the document downloader.

Everything crossing these boundaries is validated here so the aggregation
and pivot code only ever sees well-formed `InvoiceRecord`s.
"""
