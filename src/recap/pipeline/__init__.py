"""Request pipelines -- validation, error taxonomy, response shapes, and
the runners that tie them to the summarizer and email dispatcher.
"""
