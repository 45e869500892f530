"""
Commands - CLI command implementations for the CEP-47 client.

- install: deploy the contract wasm
- query:   read named values and dictionaries (info, balance, owner, ...)
- tokens:  mutating entry points (mint, burn, approve)
"""
