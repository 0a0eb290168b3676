"""Application services: build-list resolution and build execution.

Services coordinate the domain layer (core/, versioning/) with the outer
collaborators (sources/, registry/, the docker toolchain).
"""

from dockerbuilder.services.errors import InvalidPolicy, ResolveError, ToolchainError
from dockerbuilder.services.executor import BuildOutcome, ExecutionReport, execute_plan
from dockerbuilder.services.resolver import BuildPlan, compute_build_plan
from dockerbuilder.services.toolchain import DockerToolchain, MockToolchain, Toolchain

__all__ = [
    # resolver
    "BuildPlan",
    "compute_build_plan",
    # executor
    "BuildOutcome",
    "ExecutionReport",
    "execute_plan",
    # toolchain
    "DockerToolchain",
    "MockToolchain",
    "Toolchain",
    # errors
    "InvalidPolicy",
    "ResolveError",
    "ToolchainError",
]
