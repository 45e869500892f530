"""
Chain - On-chain interaction layer for the CEP-47 client.

Provides the node JSON-RPC client, runtime-argument encoding, and
deploy construction for a Casper network.

Uses httpx for transport and pycspr for CLValues, deploys and signing.
"""
