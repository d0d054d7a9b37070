"""Scaffold and deploy Laravel applications to Alibaba Cloud ACK."""

__version__ = "0.1.0"
