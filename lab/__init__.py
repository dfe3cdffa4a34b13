"""
Oracle Lab Codec
Query-id derivation and value encoding for the oracle lab contract.
"""
