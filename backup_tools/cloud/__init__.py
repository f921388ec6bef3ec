"""
Cloud storage backends.
"""

from .b2 import B2DockerClient

__all__ = ["B2DockerClient"]
