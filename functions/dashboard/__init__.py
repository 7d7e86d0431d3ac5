"""
Dashboard backend package.

Serves the content dashboard (daily verses, push tokens, uploads and the
content collections) as a FastAPI application over the same document store
and messaging backends the Cloud Functions use.
"""
