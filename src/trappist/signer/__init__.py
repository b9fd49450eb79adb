"""
Signer - ECDSA/secp256k1 key loading for transaction signing.
"""
