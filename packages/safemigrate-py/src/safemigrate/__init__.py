"""safemigrate - catch dangerous schema changes before they reach a live database."""

# Operations
from safemigrate.operations import Operation, OperationKind, operation_from_dict

# Run state and database context
from safemigrate.state import Direction, RunState
from safemigrate.context import (
    AdapterFamily,
    DatabaseContext,
    DatabaseContextProvider,
    StaticContextProvider,
    version_code,
)

# Rules and checks
from safemigrate.rules import CATALOG, Rule, Unsafe
from safemigrate.checks import CheckContext, CheckRegistry

# Configuration
from safemigrate.config import Config

# Guard
from safemigrate.decision import Block, Decision, Diagnostic, Proceed
from safemigrate.guard import Executor, SafetyGuard
from safemigrate.migration import Migration, Schema

# Exceptions
from safemigrate.exceptions import (
    ConfigurationError,
    PolicyViolationError,
    SafeMigrateError,
    UnsafeOperationError,
)

__version__ = "0.1.0"

__all__ = [
    "Operation",
    "OperationKind",
    "operation_from_dict",
    "Direction",
    "RunState",
    "AdapterFamily",
    "DatabaseContext",
    "DatabaseContextProvider",
    "StaticContextProvider",
    "version_code",
    "CATALOG",
    "Rule",
    "Unsafe",
    "CheckContext",
    "CheckRegistry",
    "Config",
    "Block",
    "Decision",
    "Diagnostic",
    "Proceed",
    "Executor",
    "SafetyGuard",
    "Migration",
    "Schema",
    "ConfigurationError",
    "PolicyViolationError",
    "SafeMigrateError",
    "UnsafeOperationError",
]
