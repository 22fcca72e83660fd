"""Sharing-chain use cases."""

from vendorflow.application.use_cases.sharing.chain_visualization import (
    build_chain_visualization,
)
from vendorflow.application.use_cases.sharing.sharing_chain_operations import (
    SharingChainService,
)

__all__ = ["SharingChainService", "build_chain_visualization"]
