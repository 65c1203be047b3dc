"""
Target language generators.

Each subpackage provides a CodeGenerator subclass plus its naming and type
mapping rules; generators are registered in ``typebridge.codegen.registry``.
"""
