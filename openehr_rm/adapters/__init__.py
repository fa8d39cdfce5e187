"""Adapters layer for the openEHR Reference Model codec.

This package contains the JSON wire codec, the database binding hooks and
the default terminology tables. Adapters implement or use the contracts
defined in the domain layer.
"""
