"""
HCM CLI - command-line interface for HTTP Client Manager.

Lists registered service apis and their operations, calls operations and
manages saved requests directly against the local registry.
"""

__version__ = "0.3.0"
