"""
Command implementations for the happycontract CLI.

Each module corresponds to a top-level CLI command:
- call:   Read-only call with decoded output
- post:   Transaction submission (dry-run and queue aware)
- events: Event lookup by transaction hash
"""
