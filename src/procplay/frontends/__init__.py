"""Frontends - user interfaces for procplay.

Submodules:
    cli/    Command-line interface (run playground scripts, list procedures)
"""
