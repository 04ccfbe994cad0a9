"""
Sales Modules

Business modules built on the sales kernel and engines.
"""
