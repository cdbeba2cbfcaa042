"""
ABI layer: typed schema records, loading, eth-abi codec and the output decoder.
"""
