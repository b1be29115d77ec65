"""
transmission-loader: bulk-add torrents to a Transmission daemon over JSON-RPC.
"""

__version__ = "0.3.0"
