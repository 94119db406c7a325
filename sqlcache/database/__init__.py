"""
sqlcache.database - connection handling and table provisioning, dood!
"""

from .manager import DatabaseManager
from .provisioner import ProvisioningError, ProvisioningState, SchemaProvisioner
from .wrapper import DatabaseWrapper, DataAccessError

__all__ = [
    "DatabaseManager",
    "DatabaseWrapper",
    "DataAccessError",
    "SchemaProvisioner",
    "ProvisioningState",
    "ProvisioningError",
]
