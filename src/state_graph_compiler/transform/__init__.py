"""
Transform package for turning a validated state graph into its outputs.

This package provides the Amazon States Language (ASL) serializer and the
permission aggregator that collects the statements an execution role needs.
"""

from .asl_serializer import AslSerializer
from .policy_aggregator import PolicyAggregator

__all__ = ['AslSerializer', 'PolicyAggregator']
