"""Capability sets: the operations a double is allowed to support.

A capability set is fixed when the double is created.  It is usually
derived from a :class:`typing.Protocol` (or any class) so that the
double mirrors the collaborator's interface, including its call
signatures::

    class PaymentService(Protocol):
        def approve(self, card_number: str, amount: float) -> bool: ...

    capabilities = CapabilitySet.from_type(PaymentService)

Capability sets built from bare names (``CapabilitySet.of("size",
"get")``) carry no signatures, so arguments are recorded exactly as
passed.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Self

from understudy._errors import UnsupportedCapability


@dataclass(frozen=True)
class CapabilitySet:
    """Immutable set of declared operations.

    Attributes:
        name: Label used in reprs and error messages (usually the
            interface's class name).
        signatures: Operation name → call signature without the
            receiver, or ``None`` when the signature is unknown.
    """

    name: str
    signatures: Mapping[str, inspect.Signature | None] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def __post_init__(self) -> None:
        for method_name in self.signatures:
            if method_name.startswith("_"):
                raise ValueError(
                    f"capability {method_name!r} must be a public method name"
                )
        object.__setattr__(
            self, "signatures", MappingProxyType(dict(self.signatures))
        )

    @classmethod
    def of(cls, *methods: str, name: str = "Double") -> Self:
        """Build a capability set from bare method names."""
        return cls(name, {m: None for m in methods})

    @classmethod
    def from_type(cls, interface: type) -> Self:
        """Collect the public routines of *interface* with their signatures."""
        signatures: dict[str, inspect.Signature | None] = {}
        for method_name, member in inspect.getmembers(interface):
            if method_name.startswith("_") or not inspect.isroutine(member):
                continue
            raw = inspect.getattr_static(interface, method_name)
            signatures[method_name] = _receiverless_signature(
                member,
                has_receiver=not (
                    isinstance(raw, staticmethod) or inspect.ismethod(member)
                ),
            )
        return cls(interface.__name__, signatures)

    @property
    def methods(self) -> frozenset[str]:
        return frozenset(self.signatures)

    def __contains__(self, method_name: object) -> bool:
        return method_name in self.signatures

    def __str__(self) -> str:
        return self.name

    def require(self, method_name: str) -> None:
        """Raise :class:`UnsupportedCapability` unless *method_name* is declared."""
        if method_name not in self.signatures:
            raise UnsupportedCapability(self.name, method_name)

    def bind(
        self,
        method_name: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> tuple[tuple[Any, ...], dict[str, Any]]:
        """Normalise a call's arguments against the declared signature.

        Arguments passed by keyword to positional parameters are moved
        into positional form so that ``approve(card_number="x",
        amount=1)`` and ``approve("x", 1)`` record identically.  With
        ``strict=False`` (or no known signature) arguments are returned
        as passed.

        Raises:
            UnsupportedCapability: *method_name* is not declared.
            TypeError: The arguments do not fit the signature.
        """
        self.require(method_name)
        signature = self.signatures[method_name]
        if signature is None or not strict:
            return tuple(args), dict(kwargs)
        bound = signature.bind(*args, **kwargs)
        return bound.args, dict(bound.kwargs)


def _receiverless_signature(
    member: Any,
    *,
    has_receiver: bool,
) -> inspect.Signature | None:
    try:
        signature = inspect.signature(member)
    except (TypeError, ValueError):
        # Some builtins expose no introspectable signature.
        return None
    if not has_receiver:
        return signature
    params = list(signature.parameters.values())
    if params and params[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        params = params[1:]
    return signature.replace(parameters=params)


CapabilitySpec = CapabilitySet | type | Iterable[str]
"""Anything :func:`as_capability_set` accepts."""


def as_capability_set(spec: CapabilitySpec) -> CapabilitySet:
    """Coerce a class, an iterable of names or a capability set."""
    if isinstance(spec, CapabilitySet):
        return spec
    if isinstance(spec, type):
        return CapabilitySet.from_type(spec)
    if isinstance(spec, str):
        return CapabilitySet.of(spec)
    return CapabilitySet.of(*spec)
