"""
Application layer: composition of core components into services.
"""
