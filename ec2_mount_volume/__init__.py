"""Deterministic EBS volume mounting for NVMe-based EC2 instances."""

__version__ = "0.1.0"
