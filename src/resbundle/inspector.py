"""Read generated bundles back into resources.

Used by the ``inspect`` command and by tests to check that what was
embedded decodes to the original bytes. Parsing relies on the fixed
declaration layout produced by :mod:`resbundle.emitter`; hex digits are
accepted in either case.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .encoding import decode_tokens
from .errors import E_BUNDLE_FORMAT, BundleFormatError
from .identifiers import size_identifier
from .templates import RETENTION_MACRO

__all__ = [
    "DecodedResource",
    "BundleInfo",
    "parse_bundle",
    "inspect_bundle",
    "validate_bundle",
]

_SIZE_RE = re.compile(
    r"^\s*(?:const\s+)?unsigned\s+int\s+(\w+)\s*=\s*(\d+)u?\s*;", re.M
)
_ARRAY_RE = re.compile(
    r"^\s*const\s+unsigned\s+char\s+(\w+)\s*\[\s*\]\s*=\s*\{([^}]*)\}\s*;",
    re.M,
)
_RETAIN_RE = re.compile(
    r"^\s*" + re.escape(RETENTION_MACRO) + r"\((\w+)\)\s*$", re.M
)
_DEFINE_RE = re.compile(r"#\s*define\s+" + re.escape(RETENTION_MACRO))


@dataclass(slots=True)
class DecodedResource:
    identifier: str
    declared_size: int | None
    data: bytes
    retained: int = 0

    @property
    def element_count(self) -> int:
        return len(self.data)

    @property
    def payload(self) -> bytes:
        """Bytes up to the declared size (terminator stripped)."""
        if self.declared_size is None:
            return self.data
        return self.data[: self.declared_size]

    @property
    def null_terminated(self) -> bool:
        return (
            self.declared_size is not None
            and len(self.data) == self.declared_size + 1
            and self.data[-1:] == b"\x00"
        )


@dataclass(slots=True)
class BundleInfo:
    resources: list[DecodedResource] = field(default_factory=list)
    has_preamble: bool = False
    orphan_sizes: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    retention_counts: dict[str, int] = field(default_factory=dict)

    def by_identifier(self) -> dict[str, DecodedResource]:
        return {r.identifier: r for r in self.resources}

    def to_dict(self) -> dict:
        return {
            "has_preamble": self.has_preamble,
            "resources": [
                {
                    "identifier": r.identifier,
                    "size": r.declared_size,
                    "elements": r.element_count,
                    "null_terminated": r.null_terminated,
                    "retained": r.retained,
                }
                for r in self.resources
            ],
        }


def parse_bundle(text: str) -> BundleInfo:
    info = BundleInfo(has_preamble=_DEFINE_RE.search(text) is not None)
    sizes = {m.group(1): int(m.group(2)) for m in _SIZE_RE.finditer(text)}
    retained = Counter(m.group(1) for m in _RETAIN_RE.finditer(text))
    info.retention_counts = dict(retained)
    arrays = [(m.group(1), m.group(2)) for m in _ARRAY_RE.finditer(text)]
    if not arrays and not info.has_preamble:
        raise BundleFormatError(
            code=E_BUNDLE_FORMAT,
            message="No resource declarations or retention preamble found",
        )
    seen: Counter[str] = Counter(name for name, _ in arrays)
    info.duplicates = sorted(n for n, c in seen.items() if c > 1)
    claimed: set[str] = set()
    for name, body in arrays:
        size_name = size_identifier(name)
        claimed.add(size_name)
        info.resources.append(
            DecodedResource(
                identifier=name,
                declared_size=sizes.get(size_name),
                data=decode_tokens(body),
                retained=min(retained.get(name, 0), retained.get(size_name, 0)),
            )
        )
    info.orphan_sizes = sorted(set(sizes) - claimed)
    return info


def inspect_bundle(path: str | Path) -> BundleInfo:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise BundleFormatError(
            code=E_BUNDLE_FORMAT,
            message=f"Cannot read bundle {p}: {e.strerror or e}",
            context={"path": str(p)},
        ) from e
    return parse_bundle(text)


def validate_bundle(info: BundleInfo) -> list[str]:
    """Check structural invariants; returns human readable issues."""
    issues: list[str] = []
    if not info.has_preamble:
        issues.append(f"missing {RETENTION_MACRO} preamble")
    for name in info.duplicates:
        issues.append(f"{name}: declared more than once")
    for name in info.orphan_sizes:
        issues.append(f"{name}: size constant without array")
    for r in info.resources:
        size_name = size_identifier(r.identifier)
        if r.declared_size is None:
            issues.append(f"{r.identifier}: missing {size_name}")
            continue
        if r.element_count not in (r.declared_size, r.declared_size + 1):
            issues.append(
                f"{r.identifier}: {r.element_count} elements for "
                f"declared size {r.declared_size}"
            )
        elif r.element_count == r.declared_size + 1 and not r.null_terminated:
            issues.append(f"{r.identifier}: extra element is not a zero byte")
        for sym in (r.identifier, size_name):
            count = info.retention_counts.get(sym, 0)
            if count != 1:
                issues.append(
                    f"{sym}: {count} retention directives (expected 1)"
                )
    return issues
