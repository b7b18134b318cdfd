"""understudy.

A small test-double framework: stubs, mocks, spies and dummies bound to
an explicit interface, with call recording and interaction verification.
"""

from importlib.metadata import PackageNotFoundError, version

from understudy._api import (
    PendingRule,
    control,
    records,
    stub,
    verify,
    verify_no_more_interactions,
    when,
)
from understudy._behavior import BehaviorRule, BehaviorTable
from understudy._capabilities import CapabilitySet, as_capability_set
from understudy._doubles import (
    Double,
    DoubleKind,
    DoubleState,
    create_double,
    wrap,
)
from understudy._errors import (
    DoubleError,
    DummyInvoked,
    NotStubbed,
    UnsupportedCapability,
    VerificationError,
    VerificationReport,
)
from understudy._matchers import ANY, AnyValue, ArgumentMatcher, CallPattern, Eq, any_of
from understudy._recorder import CallRecorder, InvocationRecord
from understudy._registry import DoubleRegistry
from understudy._settings import Settings
from understudy._verifier import Verifier

try:
    __version__ = version("understudy")
except PackageNotFoundError:
    # Source checkout without installed metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Doubles
    "Double",
    "DoubleKind",
    "DoubleRegistry",
    "DoubleState",
    "create_double",
    "wrap",
    # Capabilities
    "CapabilitySet",
    "as_capability_set",
    # Matchers
    "ANY",
    "AnyValue",
    "ArgumentMatcher",
    "CallPattern",
    "Eq",
    "any_of",
    # Behavior
    "BehaviorRule",
    "BehaviorTable",
    "PendingRule",
    "stub",
    "when",
    # Recording
    "CallRecorder",
    "InvocationRecord",
    "records",
    # Verification
    "Verifier",
    "control",
    "verify",
    "verify_no_more_interactions",
    # Errors
    "DoubleError",
    "DummyInvoked",
    "NotStubbed",
    "UnsupportedCapability",
    "VerificationError",
    "VerificationReport",
    # Settings
    "Settings",
]
