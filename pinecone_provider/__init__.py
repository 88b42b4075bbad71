"""Pinecone index provider: manage Pinecone indexes declaratively through the controller API."""

__version__ = "0.1.0"
