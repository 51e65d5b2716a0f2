"""
Core module for transaction input and configuration.
"""
