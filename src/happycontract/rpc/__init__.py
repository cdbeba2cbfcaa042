"""
RPC - On-chain interaction layer.

Async JSON-RPC client, contract handles and the in-memory submission
queue. Uses httpx + eth-abi instead of the heavyweight web3.py.
"""
