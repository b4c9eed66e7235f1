"""
Via core: grammar, parser, IR types, file discovery and error types.
"""
