"""
trustledger - deterministic state transition of a trust-graph ledger.

Packages:
- crypto: field codec and hashing
- graph: neighbor sets and action resolution
- merkle: keyed sparse Merkle tree
- transition: edge/batch processing, digests, public input
- state: off-ledger witness builder
- schemas: models, errors, canonical JSON
- config: runtime configuration
"""

__version__ = "0.1.0"
