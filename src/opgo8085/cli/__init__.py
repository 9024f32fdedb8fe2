"""
OpGo 8085 Command-Line Interface
================================

- **opgo2hex**: assemble an .opgo project into Intel HEX

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["opgo2hex"]
