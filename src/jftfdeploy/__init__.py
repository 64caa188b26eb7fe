"""
jftfdeploy - JFTF development environment provisioner
"""

__version__ = "1.0.0"

from .core import Provisioner, ProvisionerError

__all__ = ["Provisioner", "ProvisionerError"]
