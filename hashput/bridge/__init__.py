"""Bridge layer between the upload pipeline and the network.

Modules
-------
transport
    ``HttpTransport`` performs one streamed PUT through ``requests`` with
    an explicit minimum TLS version, behind the ``Transport`` protocol.
"""
