"""Summary distribution -- multi-recipient dispatch over a pluggable
transport with per-recipient failure accounting.
"""
