"""Application use cases."""

from vendorflow.application.use_cases.sharing import (
    SharingChainService,
    build_chain_visualization,
)

__all__ = ["SharingChainService", "build_chain_visualization"]
