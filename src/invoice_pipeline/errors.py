"""Exception types raised at the I/O boundaries of the pipeline.

The core (aggregation, comparison, pivoting) never raises these; they come
from the record fetch and document download collaborators.
"""

from __future__ import annotations


class InvoicePipelineError(RuntimeError):
    """Base class for invoice_pipeline errors."""


class InvoiceFetchError(InvoicePipelineError):
    """The invoice API could not be reached or answered with an error."""


class InvoicePayloadError(InvoiceFetchError):
    """The invoice API answered with a payload of the wrong shape.

    Terminal: no partial result is produced from a malformed response.
    """


class DocumentRetrievalError(InvoicePipelineError):
    """An invoice document could not be downloaded or saved."""
