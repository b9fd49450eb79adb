"""
Chain - On-chain interaction layer.

Provides a JSON-RPC client, ABI loading, and a signing client that
builds, signs and broadcasts contract calls.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
