"""
Client-side state for the Hebrew reader.

Python counterparts of the reader UI's state holders, usable from scripts,
notebooks or a desktop shell around the HTTP API.
"""
