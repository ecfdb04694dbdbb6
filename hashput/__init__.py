"""hashput: checksum-verified artifact uploads over HTTPS.

Uploads a single local file with a streamed PUT and proves integrity:
  - MD5, SHA-1 and SHA-256 computed concurrently before anything is sent
  - Digests travel as X-Checksum-* request headers
  - Optional cross-check against the server-reported SHA-256
  - Exactly one attempt; every failure becomes a terminal UploadOutcome
"""

__version__ = "0.2.0"
__description__ = "Checksum-verified artifact uploads over HTTPS"

from hashput.core.pipeline import UploadPipeline

__all__ = ["UploadPipeline", "__version__"]
