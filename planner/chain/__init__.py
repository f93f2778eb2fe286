"""Chain collaborators: state readers and operation builders."""

from planner.chain.base import (
    ChainStateReader,
    GuardedChainState,
    OperationBuilder,
    build_operations,
    guard,
)
from planner.chain.instructions import DescriptorBuilder, InstructionDescriptor
from planner.chain.snapshot import ChainSnapshot, SnapshotChainState

__all__ = [
    "ChainStateReader",
    "OperationBuilder",
    "GuardedChainState",
    "guard",
    "build_operations",
    "ChainSnapshot",
    "SnapshotChainState",
    "DescriptorBuilder",
    "InstructionDescriptor",
]
