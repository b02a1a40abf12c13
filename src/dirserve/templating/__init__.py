"""Listing templates — pure renderers plus kida integration.

Renderers return a ``Template`` descriptor (or a ready ``str``/``bytes``
body); the host renders descriptors with the environment from
``create_environment()``.
"""
