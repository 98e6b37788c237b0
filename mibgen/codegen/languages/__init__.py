"""
Language-specific code generators.

Each subpackage implements a CodeGenerator for one target language.
"""
