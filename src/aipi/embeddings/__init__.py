"""Embedding capability."""

from .text_embedder import TextEmbedder

__all__ = ["TextEmbedder"]
