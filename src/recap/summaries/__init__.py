"""Transcript summarization -- prompt composition, the provider call, and
normalization of provider failures into a small closed taxonomy.
"""
