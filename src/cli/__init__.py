"""
Command handlers for the txn-viz CLI.
"""
