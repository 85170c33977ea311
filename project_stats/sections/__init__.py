"""
Report sections

Each module defines a single stats group which is registered under the
module name when imported. Sections are shown in their ``order``.
"""
