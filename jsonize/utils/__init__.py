"""Utility modules for jsonize.

This package currently provides the logging setup shared by the schema
builder, the class registry and the codec engine.
"""
