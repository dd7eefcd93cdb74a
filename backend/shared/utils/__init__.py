"""
HTTP exceptions, API schemas and health probes shared by the API and CLI.
"""
