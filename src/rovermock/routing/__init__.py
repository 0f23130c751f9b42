"""Routing — compiled route table keyed by (method, path).

Routes are registered while a mock server is being built and compiled
into an immutable lookup structure when it freezes.
"""
