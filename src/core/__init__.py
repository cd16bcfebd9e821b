"""Core domain package for pepscope.

Core contains code-block extraction, checker sequencing, and message handling
without any Telegram or subprocess-specific code, keeping the logic portable.
"""
